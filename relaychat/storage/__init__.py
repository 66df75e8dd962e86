"""Durable client-side state.

Responsibilities:
    - Small key/value interface over browser-scoped storage
    - JSON mirror of the conversation list
    - Boolean UI preferences (sidebar pin, streaming, dark mode)
"""

from relaychat.storage.persistence import (
    CONVERSATIONS_KEY,
    DARK_MODE_KEY,
    SIDEBAR_PINNED_KEY,
    STREAMING_ENABLED_KEY,
    clear_conversations,
    load_conversations,
    load_flag,
    save_conversations,
    save_flag,
)
from relaychat.storage.store import KeyValueStore, MappingStore

__all__ = [
    "CONVERSATIONS_KEY",
    "DARK_MODE_KEY",
    "SIDEBAR_PINNED_KEY",
    "STREAMING_ENABLED_KEY",
    "KeyValueStore",
    "MappingStore",
    "clear_conversations",
    "load_conversations",
    "load_flag",
    "save_conversations",
    "save_flag",
]
