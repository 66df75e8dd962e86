"""NiceGUI chat interface backed by the relay server."""

import os
from collections.abc import Awaitable, Callable
from functools import partial

from nicegui import app, ui

from relaychat.client.api_client import API_BASE_URL, RelayClient
from relaychat.models.conversation import Message
from relaychat.state.controller import ChatController
from relaychat.storage.store import MappingStore
from relaychat.ui.helpers import (
    ErrorChangeTracker,
    format_clock,
    format_relative_time,
    group_messages_by_turn,
    sort_by_recent,
)
from relaychat.ui.input_bar import render_input_bar

ERROR_AUTO_DISMISS_SECONDS = 5.0

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    .message-user {
        background: #e5e5e5;
        color: #171717;
        border-radius: 18px 4px 18px 18px;
    }
    .body--dark .message-user { background: #404040; color: white; }

    .avatar-user { background: #f5f5f5; }
    .avatar-assistant { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .typing-dot {
        width: 6px; height: 6px;
        background: #a3a3a3;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #8b5cf6; }

    .turn-last { min-height: calc(100vh - 290px); }

    .message-assistant pre { margin: 0.5rem 0; overflow-x: auto; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant a { color: #7c3aed; }
</style>
"""


def make_confirm(host: ui.element) -> Callable[[str], Awaitable[bool]]:
    """Build a yes/no modal prompt whose dialogs live under ``host``.

    ``host`` must outlive refreshes of the sidebar, which is where the
    prompts are triggered from.
    """

    async def confirm(prompt: str) -> bool:
        with host, ui.dialog() as dialog, ui.card():
            ui.label(prompt)
            with ui.row().classes("w-full justify-end"):
                ui.button("Cancel", on_click=lambda: dialog.submit(False)).props("flat")
                ui.button("Confirm", on_click=lambda: dialog.submit(True)).props(
                    "unelevated color=negative"
                )
        result = await dialog
        dialog.delete()
        return bool(result)

    return confirm


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    dialog_host = ui.element("div")

    client = RelayClient(base_url=API_BASE_URL)
    controller = ChatController(MappingStore(app.storage.user), client, make_confirm(dialog_host))
    state = controller.state

    ui.dark_mode().bind_value_from(state, "dark_mode")

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        color = "text-neutral-700" if is_user else "text-white"
        with ui.element("div").classes(
            f"w-7 h-7 rounded-full flex items-center justify-center shrink-0 {css}"
        ):
            ui.icon(icon).classes(f"{color} text-base")

    def render_message(msg: Message) -> None:
        if msg.role == "user":
            with ui.row().classes("w-full justify-end gap-3 items-start no-wrap"):
                with ui.column().classes("max-w-[60%] gap-1 px-4 py-3 message-user"):
                    ui.label(msg.content).classes("text-[15px] whitespace-pre-wrap break-words")
                    ui.label(format_clock(msg.timestamp)).classes("text-[11px] text-neutral-500")
                render_avatar(True)
        else:
            with ui.row().classes("w-full justify-start gap-4 items-start no-wrap"):
                render_avatar(False)
                with ui.column().classes("flex-1 min-w-0 gap-1 message-assistant"):
                    ui.markdown(msg.content)
                    ui.label(format_clock(msg.timestamp)).classes("text-[11px] text-neutral-500")

    def render_loading_dots() -> None:
        with ui.row().classes("w-full justify-start gap-4 items-center"):
            render_avatar(False)
            with ui.row().classes("gap-1"):
                for _ in range(3):
                    ui.element("div").classes("typing-dot")

    @ui.refreshable
    def error_banner() -> None:
        if not state.error:
            return
        with ui.row().classes(
            "absolute top-4 right-4 z-20 max-w-sm items-center gap-3 px-4 py-3 "
            "rounded-lg border border-red-300 bg-red-50 text-red-700 shadow"
        ):
            ui.icon("error_outline").classes("text-lg")
            ui.label(state.error).classes("text-sm flex-1")
            ui.button(icon="close", on_click=controller.dismiss_error).props("flat round dense")
        ui.timer(ERROR_AUTO_DISMISS_SECONDS, controller.dismiss_error, once=True)

    @ui.refreshable
    def message_list() -> None:
        conversation = state.active_conversation
        messages = conversation.messages if conversation else []

        if not messages and not state.is_loading:
            with ui.column().classes("w-full h-96 items-center justify-center gap-2"):
                ui.icon("auto_awesome").classes("text-5xl text-neutral-300")
                ui.label("What can I help with?").classes("text-lg font-medium")
                ui.label("Ask me anything: questions, code, ideas, or just to chat.").classes(
                    "text-sm text-neutral-500"
                )
            return

        groups = group_messages_by_turn(messages)
        for index, group in enumerate(groups):
            is_last = index == len(groups) - 1
            with ui.column().classes(f"w-full gap-6 {'turn-last' if is_last else ''}"):
                for msg in group:
                    render_message(msg)
                if is_last and state.is_loading and not state.is_streaming:
                    render_loading_dots()

    async def delete(conversation_id: str) -> None:
        await controller.delete_conversation(conversation_id)

    async def clear() -> None:
        await controller.clear_history()

    @ui.refreshable
    def sidebar() -> None:
        expanded = state.sidebar_pinned
        with ui.row().classes("w-full items-center justify-between px-2 h-12"):
            if expanded:
                ui.label("History").classes("text-[13px] font-medium text-neutral-500")
            ui.button(
                icon="push_pin" if expanded else "chevron_right",
                on_click=controller.toggle_sidebar_pin,
            ).props("flat round dense").tooltip(
                "Unpin sidebar" if expanded else "Pin sidebar"
            )

        (
            ui.button(
                "New chat" if expanded else "", icon="add", on_click=controller.new_conversation
            )
            .props("unelevated color=dark")
            .classes("w-full")
        )

        conversations = sort_by_recent(state.conversations)
        with ui.column().classes("w-full gap-0.5 flex-grow overflow-y-auto"):
            if not conversations and expanded:
                with ui.column().classes("w-full items-center py-16 gap-1"):
                    ui.label("No conversations").classes("text-[13px] text-neutral-500")
                    ui.label("Start a new chat").classes("text-[12px] text-neutral-400")
            for conversation in conversations:
                is_active = conversation.id == state.active_conversation_id
                row_css = "bg-neutral-200 dark:bg-neutral-800" if is_active else ""
                with ui.row().classes(
                    "w-full items-center gap-2 px-3 py-2 rounded-md cursor-pointer no-wrap "
                    f"{row_css}"
                ).on("click", partial(controller.select_conversation, conversation.id)):
                    if not expanded:
                        ui.icon("circle").classes("text-[8px]").tooltip(conversation.title)
                        continue
                    ui.label(conversation.title).classes("text-[13px] truncate flex-1")
                    ui.label(format_relative_time(conversation.updated_at)).classes(
                        "text-[11px] text-neutral-500"
                    )
                    ui.button(icon="delete").props("flat round dense size=sm").on(
                        "click.stop", partial(delete, conversation.id)
                    )

        if state.conversations:
            (
                ui.button("Clear history" if expanded else "", icon="delete_sweep", on_click=clear)
                .props("flat color=grey")
                .classes("w-full")
            )

    def refresh() -> None:
        sidebar.refresh()
        message_list.refresh()
        error_banner.refresh()

    controller.subscribe(refresh)

    error_tracker = ErrorChangeTracker()

    def notify_error() -> None:
        if error_tracker.is_new(state.error):
            ui.notify(state.error, type="negative")

    controller.subscribe(notify_error)

    # === UI Layout ===
    with ui.left_drawer(value=True).classes("p-2 gap-2").props("width=288 bordered") as drawer:
        sidebar()

    def sync_drawer_width() -> None:
        if state.sidebar_pinned:
            drawer.props(remove="mini")
        else:
            drawer.props("mini mini-width=64")

    sync_drawer_width()
    controller.subscribe(sync_drawer_width)

    def toggle_menu() -> None:
        drawer.toggle()
        controller.set_mobile_menu_open(drawer.value)

    with ui.header().classes("bg-transparent text-inherit items-center justify-between px-4"):
        ui.button(icon="menu", on_click=toggle_menu).props("flat round").classes("md:hidden")
        with ui.row().classes("items-center gap-4 ml-auto"):
            ui.switch(
                "Dark",
                value=state.dark_mode,
                on_change=lambda: controller.toggle_dark_mode(),
            )
            ui.switch(
                "Streaming",
                value=state.streaming_enabled,
                on_change=lambda: controller.toggle_streaming(),
            )

    with ui.column().classes("w-full max-w-4xl mx-auto relative px-8 pb-4"):
        error_banner()
        message_list()

    with ui.footer().classes("bg-transparent"), ui.column().classes("w-full max-w-2xl mx-auto"):
        render_input_bar(controller, client)


def main() -> None:
    ui.run(
        title="AI Chat",
        port=int(os.getenv("UI_PORT", "8080")),
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "relay-chat-secret"),
        reload=False,
    )


if __name__ == "__main__":
    main()
