"""HTTP client for the relay server.

Every failure, whether transport, non-2xx or an ``error`` frame, surfaces as
ApiError so callers handle exactly one error type.
"""

import logging
import os
from collections.abc import Callable
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from relaychat.client.frames import SSELineBuffer, parse_frame
from relaychat.models.schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    DeltaFrame,
    DoneFrame,
    ErrorFrame,
    TranscriptionResponse,
)

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000")

CHAT_PATH = "/api/chat"
CHAT_STREAM_PATH = "/api/chat/stream"
TRANSCRIBE_PATH = "/api/transcribe"

NETWORK_ERROR_MESSAGE = "Unable to connect to the server. Please check your connection."


class ApiError(Exception):
    """Normalized relay failure.

    Attributes:
        message: Human-readable description, server-supplied when available.
        status_code: HTTP status, 0 when the server was never reached.
        is_network_error: True when the request did not reach the server.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        is_network_error: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.is_network_error = is_network_error


def _error_from_response(response: httpx.Response) -> ApiError:
    """Build an ApiError from a non-2xx response body."""
    try:
        data = response.json()
    except ValueError:
        data = response.text

    if isinstance(data, dict):
        message = data.get("error") or data.get("message") or data.get("detail")
        if message and not isinstance(message, str):
            message = str(message)
    else:
        message = data
    return ApiError(message or "An error occurred", response.status_code)


INVALID_RESPONSE_MESSAGE = "Invalid response from server"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_body(response: httpx.Response, model: type[ModelT]) -> ModelT:
    """Validate a 2xx body, normalizing malformed payloads into ApiError."""
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        logger.warning(f"Unexpected relay response body: {e}")
        raise ApiError(INVALID_RESPONSE_MESSAGE, response.status_code) from e


def _network_error(error: httpx.RequestError) -> ApiError:
    logger.warning(f"Relay request failed: {error!r}")
    return ApiError(NETWORK_ERROR_MESSAGE, 0, is_network_error=True)


class RelayClient:
    """Async client for the relay's chat and transcription endpoints.

    Args:
        base_url: Relay server root URL.
        timeout: Timeout in seconds for blocking requests.
        stream_timeout: Timeout for streaming reads. None waits forever.
        transport: Optional httpx transport (tests pass MockTransport or
            ASGITransport here).
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float | None = 120.0,
        stream_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._stream_timeout = stream_timeout
        self._transport = transport

    def _client(self, timeout: float | None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            transport=self._transport,
        )

    @staticmethod
    def _payload(messages: list[ChatMessage]) -> dict:
        return ChatRequest(messages=messages).model_dump()

    async def send_message(self, messages: list[ChatMessage]) -> str:
        """Request a complete reply.

        Args:
            messages: Conversation context ending with the new user message.

        Returns:
            The assistant's reply text.

        Raises:
            ApiError: On empty input, transport failure or non-2xx status.
        """
        if not messages:
            raise ApiError("Messages cannot be empty", 400)

        try:
            async with self._client(self._timeout) as client:
                response = await client.post(CHAT_PATH, json=self._payload(messages))
        except httpx.RequestError as e:
            raise _network_error(e) from e

        if response.is_error:
            raise _error_from_response(response)
        return _parse_body(response, ChatResponse).content

    async def stream_message(
        self,
        messages: list[ChatMessage],
        on_chunk: Callable[[str], None],
        on_complete: Callable[[], None],
        on_error: Callable[[ApiError], None],
    ) -> None:
        """Consume the relay's event stream.

        Exactly one of ``on_complete`` / ``on_error`` is called. A body that
        ends without a ``done`` frame counts as complete.
        """
        if not messages:
            on_error(ApiError("Messages cannot be empty", 400))
            return

        try:
            async with (
                self._client(self._stream_timeout) as client,
                client.stream(
                    "POST",
                    CHAT_STREAM_PATH,
                    json=self._payload(messages),
                    headers={"Accept": "text/event-stream"},
                ) as response,
            ):
                if response.is_error:
                    await response.aread()
                    raise _error_from_response(response)

                buffer = SSELineBuffer()
                async for text in response.aiter_text():
                    for line in buffer.feed(text):
                        if self._handle_line(line, on_chunk):
                            on_complete()
                            return
                for line in buffer.flush():
                    if self._handle_line(line, on_chunk):
                        break
        except ApiError as e:
            on_error(e)
            return
        except httpx.RequestError as e:
            on_error(_network_error(e))
            return

        on_complete()

    @staticmethod
    def _handle_line(line: str, on_chunk: Callable[[str], None]) -> bool:
        """Apply one stream line. Returns True once the stream is done."""
        frame = parse_frame(line)
        match frame:
            case DeltaFrame(content=content):
                on_chunk(content)
            case DoneFrame():
                return True
            case ErrorFrame(message=message):
                raise ApiError(message)
        return False

    async def transcribe_audio(
        self,
        audio: bytes,
        filename: str = "audio.webm",
        content_type: str = "audio/webm",
    ) -> str:
        """Upload recorded audio and return its transcript.

        Raises:
            ApiError: On transport failure or non-2xx status.
        """
        try:
            async with self._client(self._timeout) as client:
                response = await client.post(
                    TRANSCRIBE_PATH,
                    files={"audio": (filename, audio, content_type)},
                )
        except httpx.RequestError as e:
            raise _network_error(e) from e

        if response.is_error:
            raise _error_from_response(response)
        return _parse_body(response, TranscriptionResponse).text
