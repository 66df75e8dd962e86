"""Unit tests for SSE frame parsing and line reassembly."""

import pytest

from relaychat.client.frames import SSELineBuffer, parse_frame
from relaychat.models.schemas import DeltaFrame, DoneFrame, ErrorFrame, encode_frame


class TestParseFrame:
    """Tests for parse_frame."""

    def test_delta(self) -> None:
        assert parse_frame('data: {"type":"delta","content":"Hel"}') == DeltaFrame(content="Hel")

    def test_done(self) -> None:
        assert parse_frame('data: {"type":"done"}') == DoneFrame()

    def test_error(self) -> None:
        frame = parse_frame('data: {"type":"error","message":"rate limited"}')

        assert frame == ErrorFrame(message="rate limited")

    def test_delta_content_keeps_whitespace(self) -> None:
        frame = parse_frame('data: {"type":"delta","content":" world\\n"}')

        assert frame == DeltaFrame(content=" world\n")

    @pytest.mark.parametrize(
        "line",
        [
            "",
            ": keep-alive",
            "event: message",
            "data: {not json",
            'data: {"type":"ping"}',
            'data: {"type":"delta"}',
        ],
    )
    def test_ignored_lines(self, line: str) -> None:
        assert parse_frame(line) is None

    def test_encoded_frame_parses_back(self) -> None:
        line = encode_frame(DeltaFrame(content="ok")).rstrip("\n")

        assert parse_frame(line) == DeltaFrame(content="ok")


class TestSSELineBuffer:
    """Tests for reassembling lines across reads."""

    def test_complete_lines_released(self) -> None:
        buffer = SSELineBuffer()

        assert buffer.feed("a\nb\n") == ["a", "b"]

    def test_partial_line_held_until_newline(self) -> None:
        buffer = SSELineBuffer()

        assert buffer.feed('data: {"type":"del') == []
        assert buffer.feed('ta","content":"x"}\n') == ['data: {"type":"delta","content":"x"}']

    def test_crlf_stripped(self) -> None:
        assert SSELineBuffer().feed("data: x\r\n\r\n") == ["data: x", ""]

    def test_flush_returns_remainder_once(self) -> None:
        buffer = SSELineBuffer()
        buffer.feed("tail")

        assert buffer.flush() == ["tail"]
        assert buffer.flush() == []
