"""Conversation and message value types.

These are the client-side records the chat page renders and the store
persists. Timestamps are timezone-aware UTC datetimes and serialize to ISO
strings, so a save/load cycle reproduces them exactly.
"""

import uuid
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]

DEFAULT_TITLE = "New Chat"
TITLE_MAX_LENGTH = 30


def _now() -> datetime:
    return datetime.now(UTC)


def generate_id() -> str:
    """Return an opaque unique identifier."""
    return str(uuid.uuid4())


class Message(BaseModel):
    """A single chat message.

    Only ``content`` changes after creation: it grows while an assistant
    reply streams in.

    Attributes:
        id: Unique identifier within the parent conversation.
        role: Speaker, either ``user`` or ``assistant``.
        content: Message text.
        timestamp: Creation time.
    """

    id: str = Field(default_factory=generate_id)
    role: Role
    content: str
    timestamp: datetime = Field(default_factory=_now)


class Conversation(BaseModel):
    """An ordered, titled thread of messages.

    Attributes:
        id: Unique identifier within the store.
        title: Derived from the first user message.
        messages: Messages in chronological order.
        created_at: Creation time (``createdAt`` when serialized).
        updated_at: Time of the last append (``updatedAt`` when serialized).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    title: str = DEFAULT_TITLE
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=_now, alias="updatedAt")

    @property
    def is_empty(self) -> bool:
        return not self.messages

    def touch(self) -> None:
        self.updated_at = _now()


def derive_title(content: str) -> str:
    """Build a conversation title from its first user message.

    Args:
        content: The first user message.

    Returns:
        The first 30 characters, with ``...`` appended when truncated.
    """
    if len(content) > TITLE_MAX_LENGTH:
        return content[:TITLE_MAX_LENGTH] + "..."
    return content


def create_conversation(title: str | None = None) -> Conversation:
    return Conversation(title=title or DEFAULT_TITLE)


def create_message(role: Role, content: str) -> Message:
    return Message(role=role, content=content)
