"""HTTP client for the relay server.

Used by the chat page to reach the relay's chat, streaming chat and
transcription endpoints. Parses the server-sent event stream into typed
frames and normalizes every failure into ApiError.
"""

from relaychat.client.api_client import ApiError, RelayClient
from relaychat.client.frames import SSELineBuffer, parse_frame

__all__ = ["ApiError", "RelayClient", "SSELineBuffer", "parse_frame"]
