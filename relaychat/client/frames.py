"""Server-sent event parsing for the relay stream."""

import logging

from pydantic import ValidationError

from relaychat.models.schemas import DeltaFrame, DoneFrame, ErrorFrame, stream_frame_adapter

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "


def parse_frame(line: str) -> DeltaFrame | DoneFrame | ErrorFrame | None:
    """Parse one line of the event stream.

    Args:
        line: A complete line without its trailing newline.

    Returns:
        The recognized frame, or None when the line carries no frame
        (blank separator, other SSE field, malformed JSON, unknown type).
    """
    if not line.startswith(DATA_PREFIX):
        return None
    try:
        return stream_frame_adapter.validate_json(line[len(DATA_PREFIX) :])
    except ValidationError:
        logger.debug(f"Skipping unrecognized stream frame: {line!r}")
        return None


class SSELineBuffer:
    """Reassembles lines from text that arrives in arbitrary pieces.

    A frame split across network reads is held back until its newline
    arrives; only complete lines are released.
    """

    def __init__(self) -> None:
        self._pending = ""

    def feed(self, text: str) -> list[str]:
        self._pending += text
        *lines, self._pending = self._pending.split("\n")
        return [line.removesuffix("\r") for line in lines]

    def flush(self) -> list[str]:
        """Release whatever is left once the stream has ended."""
        rest, self._pending = self._pending, ""
        return [rest.removesuffix("\r")] if rest else []
