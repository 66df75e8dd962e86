from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

from relaychat.models.conversation import Role


class ChatMessage(BaseModel):
    """A message as sent to the relay: role and content only.

    Attributes:
        role: The speaker identifier (user or assistant).
        content: The message text.
    """

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Request payload for both chat endpoints.

    Attributes:
        messages: Conversation context, oldest first, ending with the new
            user message. Emptiness is checked by the route so it can answer
            400 instead of 422.
    """

    messages: list[ChatMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Complete assistant reply from the non-streaming endpoint."""

    content: str


class TranscriptionResponse(BaseModel):
    """Transcript of an uploaded audio clip."""

    text: str


class ErrorResponse(BaseModel):
    """Uniform JSON error body."""

    error: str


class DeltaFrame(BaseModel):
    """A text fragment, appended by the consumer in arrival order."""

    type: Literal["delta"] = "delta"
    content: str


class DoneFrame(BaseModel):
    """Successful end of stream."""

    type: Literal["done"] = "done"


class ErrorFrame(BaseModel):
    """Abnormal end of stream, sent once response headers are committed."""

    type: Literal["error"] = "error"
    message: str


StreamFrame = Annotated[DeltaFrame | DoneFrame | ErrorFrame, Field(discriminator="type")]

stream_frame_adapter: TypeAdapter[DeltaFrame | DoneFrame | ErrorFrame] = TypeAdapter(StreamFrame)


def encode_frame(frame: DeltaFrame | DoneFrame | ErrorFrame) -> str:
    """Serialize a frame as a server-sent event."""
    return f"data: {frame.model_dump_json()}\n\n"
