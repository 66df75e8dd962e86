"""Conversation state controller.

Single authority for the conversation list, the active selection and the
in-flight request flags. All writes to the store go through here, and the
full conversation list is rewritten after every change to it.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from relaychat.client.api_client import ApiError
from relaychat.models.conversation import (
    Message,
    create_conversation,
    create_message,
    derive_title,
    generate_id,
)
from relaychat.models.schemas import ChatMessage
from relaychat.state.reducers import (
    ChatState,
    add_conversation,
    append_message,
    find_conversation,
    find_empty_conversation,
    has_message,
    history_window,
    most_recent_conversation,
    remove_conversation,
    set_message_content,
)
from relaychat.storage.persistence import (
    DARK_MODE_KEY,
    SIDEBAR_PINNED_KEY,
    STREAMING_ENABLED_KEY,
    clear_conversations,
    load_conversations,
    load_flag,
    save_conversations,
    save_flag,
)
from relaychat.storage.store import KeyValueStore

logger = logging.getLogger(__name__)

ERROR_PREFIX = "⚠️ Error: "

ConfirmFn = Callable[[str], Awaitable[bool]]
Listener = Callable[[], None]


class ChatBackend(Protocol):
    """The relay operations the controller needs (RelayClient or a fake)."""

    async def send_message(self, messages: list[ChatMessage]) -> str: ...

    async def stream_message(
        self,
        messages: list[ChatMessage],
        on_chunk: Callable[[str], None],
        on_complete: Callable[[], None],
        on_error: Callable[[ApiError], None],
    ) -> None: ...


def error_annotation(message: str) -> str:
    return f"{ERROR_PREFIX}{message}"


class ChatController:
    """Owns ChatState and orchestrates the send-message flows.

    Args:
        store: Durable key/value storage for conversations and preferences.
        client: Relay client used for chat requests.
        confirm: Async yes/no prompt used before destructive actions.
    """

    def __init__(self, store: KeyValueStore, client: ChatBackend, confirm: ConfirmFn) -> None:
        self._store = store
        self._client = client
        self._confirm = confirm
        self._listeners: list[Listener] = []

        self.state = ChatState(
            conversations=load_conversations(store),
            sidebar_pinned=load_flag(store, SIDEBAR_PINNED_KEY),
            streaming_enabled=load_flag(store, STREAMING_ENABLED_KEY),
            dark_mode=load_flag(store, DARK_MODE_KEY),
        )
        recent = most_recent_conversation(self.state)
        self.state.active_conversation_id = recent.id if recent else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every state change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _commit(self) -> None:
        save_conversations(self._store, self.state.conversations)
        self._notify()

    # Conversation list

    def new_conversation(self) -> None:
        """Select the existing empty conversation, or create one."""
        state = self.state
        state.error = None

        existing = find_empty_conversation(state)
        if existing is not None:
            state.active_conversation_id = existing.id
            self._notify()
            return

        conversation = create_conversation()
        add_conversation(state, conversation)
        state.active_conversation_id = conversation.id
        self._commit()

    def select_conversation(self, conversation_id: str) -> None:
        self.state.active_conversation_id = conversation_id
        self.state.error = None
        self._notify()

    async def delete_conversation(self, conversation_id: str) -> bool:
        """Delete a conversation after confirmation.

        When the deleted conversation was active, the most recently updated
        remaining one becomes active.

        Returns:
            True if the conversation was deleted.
        """
        state = self.state
        conversation = find_conversation(state, conversation_id)
        title = conversation.title if conversation else "this chat"
        if not await self._confirm(f"Are you sure you want to delete {title}?"):
            return False
        if not remove_conversation(state, conversation_id):
            return False

        if state.active_conversation_id == conversation_id:
            recent = most_recent_conversation(state)
            state.active_conversation_id = recent.id if recent else None
        self._commit()
        return True

    async def clear_history(self) -> bool:
        """Remove every conversation after confirmation."""
        if not await self._confirm("Are you sure you want to clear all chat history?"):
            return False
        state = self.state
        state.conversations = []
        state.active_conversation_id = None
        state.error = None
        clear_conversations(self._store)
        self._notify()
        return True

    # Sending

    async def send_message(self, content: str) -> None:
        """Append a user message and fetch the assistant's reply.

        Args:
            content: Message text. Blank text is ignored.
        """
        if not content.strip():
            logger.debug("Ignoring blank message")
            return

        state = self.state
        conversation = state.active_conversation
        if conversation is None:
            conversation = create_conversation()
            add_conversation(state, conversation)
            state.active_conversation_id = conversation.id
        conversation_id = conversation.id

        outbound = [
            ChatMessage(role=m.role, content=m.content) for m in history_window(conversation)
        ]
        outbound.append(ChatMessage(role="user", content=content))

        if conversation.is_empty:
            conversation.title = derive_title(content)
        append_message(state, conversation_id, create_message("user", content))

        state.is_loading = True
        state.error = None
        self._commit()

        if state.streaming_enabled:
            await self._stream_reply(conversation_id, outbound)
        else:
            await self._fetch_reply(conversation_id, outbound)

    async def _fetch_reply(self, conversation_id: str, outbound: list[ChatMessage]) -> None:
        state = self.state
        try:
            reply = await self._client.send_message(outbound)
        except ApiError as e:
            logger.warning(f"Chat request failed: {e.message}")
            state.error = e.message
            append_message(
                state, conversation_id, create_message("assistant", error_annotation(e.message))
            )
        else:
            append_message(state, conversation_id, create_message("assistant", reply))
        finally:
            state.is_loading = False
            self._commit()

    async def _stream_reply(self, conversation_id: str, outbound: list[ChatMessage]) -> None:
        state = self.state
        assistant_id = generate_id()
        accumulated = ""

        def on_chunk(chunk: str) -> None:
            nonlocal accumulated
            accumulated += chunk
            state.is_streaming = True
            if has_message(state, conversation_id, assistant_id):
                set_message_content(state, conversation_id, assistant_id, accumulated)
            else:
                append_message(
                    state,
                    conversation_id,
                    Message(id=assistant_id, role="assistant", content=accumulated),
                )
            self._commit()

        def on_complete() -> None:
            state.is_loading = False
            state.is_streaming = False
            self._commit()

        def on_error(error: ApiError) -> None:
            logger.warning(f"Chat stream failed: {error.message}")
            state.error = error.message
            annotated = error_annotation(error.message)
            if has_message(state, conversation_id, assistant_id):
                set_message_content(state, conversation_id, assistant_id, annotated)
            else:
                append_message(
                    state,
                    conversation_id,
                    Message(id=assistant_id, role="assistant", content=annotated),
                )
            state.is_loading = False
            state.is_streaming = False
            self._commit()

        await self._client.stream_message(outbound, on_chunk, on_complete, on_error)

    # Preferences and transient UI flags

    def toggle_streaming(self) -> None:
        self.state.streaming_enabled = not self.state.streaming_enabled
        save_flag(self._store, STREAMING_ENABLED_KEY, self.state.streaming_enabled)
        self._notify()

    def toggle_dark_mode(self) -> None:
        self.state.dark_mode = not self.state.dark_mode
        save_flag(self._store, DARK_MODE_KEY, self.state.dark_mode)
        self._notify()

    def toggle_sidebar_pin(self) -> None:
        self.state.sidebar_pinned = not self.state.sidebar_pinned
        save_flag(self._store, SIDEBAR_PINNED_KEY, self.state.sidebar_pinned)
        self._notify()

    def set_mobile_menu_open(self, is_open: bool) -> None:
        self.state.mobile_menu_open = is_open
        self._notify()

    def dismiss_error(self) -> None:
        self.state.error = None
        self._notify()
