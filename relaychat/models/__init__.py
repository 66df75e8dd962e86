"""Pydantic models for conversations and the relay wire format.

Models:
    - Message, Conversation: client-side chat records
    - ChatMessage, ChatRequest, ChatResponse: chat endpoint payloads
    - TranscriptionResponse: transcription endpoint payload
    - DeltaFrame, DoneFrame, ErrorFrame: server-sent stream events
"""

from relaychat.models.conversation import (
    Conversation,
    Message,
    Role,
    create_conversation,
    create_message,
    derive_title,
    generate_id,
)
from relaychat.models.schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    DeltaFrame,
    DoneFrame,
    ErrorFrame,
    ErrorResponse,
    StreamFrame,
    TranscriptionResponse,
    encode_frame,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "Conversation",
    "DeltaFrame",
    "DoneFrame",
    "ErrorFrame",
    "ErrorResponse",
    "Message",
    "Role",
    "StreamFrame",
    "TranscriptionResponse",
    "create_conversation",
    "create_message",
    "derive_title",
    "encode_frame",
    "generate_id",
]
