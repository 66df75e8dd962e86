"""Chat state and the update functions that act on it.

Every update that targets a conversation or message looks it up by id and
silently does nothing when it is gone. A reply that arrives after its
conversation was deleted is dropped here.
"""

from dataclasses import dataclass, field

from relaychat.models.conversation import Conversation, Message

HISTORY_WINDOW = 19


@dataclass
class ChatState:
    """All state behind the chat page."""

    conversations: list[Conversation] = field(default_factory=list)
    active_conversation_id: str | None = None
    is_loading: bool = False
    is_streaming: bool = False
    error: str | None = None
    sidebar_pinned: bool = True
    streaming_enabled: bool = True
    dark_mode: bool = True
    mobile_menu_open: bool = False

    @property
    def active_conversation(self) -> Conversation | None:
        if self.active_conversation_id is None:
            return None
        return find_conversation(self, self.active_conversation_id)


def find_conversation(state: ChatState, conversation_id: str) -> Conversation | None:
    return next((c for c in state.conversations if c.id == conversation_id), None)


def find_empty_conversation(state: ChatState) -> Conversation | None:
    return next((c for c in state.conversations if c.is_empty), None)


def most_recent_conversation(state: ChatState) -> Conversation | None:
    """The conversation with the latest ``updated_at``, or None."""
    if not state.conversations:
        return None
    return max(state.conversations, key=lambda c: c.updated_at)


def add_conversation(state: ChatState, conversation: Conversation) -> None:
    """Prepend a conversation."""
    state.conversations.insert(0, conversation)


def remove_conversation(state: ChatState, conversation_id: str) -> bool:
    before = len(state.conversations)
    state.conversations = [c for c in state.conversations if c.id != conversation_id]
    return len(state.conversations) != before


def append_message(state: ChatState, conversation_id: str, message: Message) -> bool:
    """Append a message and refresh ``updated_at``.

    Returns:
        False when the conversation no longer exists.
    """
    conversation = find_conversation(state, conversation_id)
    if conversation is None:
        return False
    conversation.messages.append(message)
    conversation.touch()
    return True


def set_message_content(
    state: ChatState,
    conversation_id: str,
    message_id: str,
    content: str,
) -> bool:
    """Replace a message's content in place.

    Returns:
        False when the conversation or message no longer exists.
    """
    conversation = find_conversation(state, conversation_id)
    if conversation is None:
        return False
    for message in conversation.messages:
        if message.id == message_id:
            message.content = content
            return True
    return False


def has_message(state: ChatState, conversation_id: str, message_id: str) -> bool:
    conversation = find_conversation(state, conversation_id)
    return conversation is not None and any(m.id == message_id for m in conversation.messages)


def history_window(conversation: Conversation | None) -> list[Message]:
    """The trailing messages sent as context with a new message."""
    if conversation is None:
        return []
    return conversation.messages[-HISTORY_WINDOW:]
