"""Load and save chat state through a KeyValueStore.

Persistence is best-effort: every failure here is logged and swallowed so a
broken store never interrupts the chat.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from relaychat.models.conversation import Conversation
from relaychat.storage.store import KeyValueStore

logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = "ai-chat-conversations"
SIDEBAR_PINNED_KEY = "ai-chat-sidebar-pinned"
STREAMING_ENABLED_KEY = "ai-chat-streaming-enabled"
DARK_MODE_KEY = "ai-chat-dark-mode"

_conversation_list = TypeAdapter(list[Conversation])


def load_conversations(store: KeyValueStore) -> list[Conversation]:
    """Read the persisted conversation list.

    Args:
        store: Backing store.

    Returns:
        Conversations in stored order, or an empty list when nothing is
        stored or the stored value cannot be decoded.
    """
    try:
        raw = store.get_item(CONVERSATIONS_KEY)
        if raw:
            return _conversation_list.validate_json(raw)
    except ValidationError as e:
        logger.error(f"Failed to load conversations: {e}")
    except Exception as e:
        logger.error(f"Failed to read conversations from storage: {e}")
    return []


def save_conversations(store: KeyValueStore, conversations: list[Conversation]) -> None:
    """Rewrite the full persisted conversation list."""
    try:
        payload = _conversation_list.dump_json(conversations, by_alias=True).decode()
        store.set_item(CONVERSATIONS_KEY, payload)
    except Exception as e:
        logger.error(f"Failed to save conversations: {e}")


def clear_conversations(store: KeyValueStore) -> None:
    try:
        store.remove_item(CONVERSATIONS_KEY)
    except Exception as e:
        logger.error(f"Failed to clear conversations: {e}")


def load_flag(store: KeyValueStore, key: str, default: bool = True) -> bool:
    """Read a boolean preference stored as ``"true"`` / ``"false"``."""
    try:
        stored = store.get_item(key)
    except Exception as e:
        logger.error(f"Failed to read preference {key}: {e}")
        return default
    if stored is None:
        return default
    return stored == "true"


def save_flag(store: KeyValueStore, key: str, value: bool) -> None:
    try:
        store.set_item(key, "true" if value else "false")
    except Exception as e:
        logger.error(f"Failed to save preference {key}: {e}")
