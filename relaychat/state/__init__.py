"""Client-side conversation state.

Responsibilities:
    - Explicit ChatState object and id-guarded update functions
    - Conversation lifecycle (new, select, delete, clear)
    - Send-message orchestration, streaming and blocking
    - Mirroring every change into the persistent store

Holds no UI code, so it is tested against an in-memory store and a fake
relay client.
"""

from relaychat.state.controller import ChatController, error_annotation
from relaychat.state.reducers import HISTORY_WINDOW, ChatState

__all__ = ["HISTORY_WINDOW", "ChatController", "ChatState", "error_annotation"]
