"""Unit tests for the chat page's display helpers and input bar state."""

import asyncio
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from relaychat.client.api_client import RelayClient
from relaychat.models.conversation import Conversation, create_message
from relaychat.state.controller import ChatController
from relaychat.storage.persistence import STREAMING_ENABLED_KEY, save_flag
from relaychat.storage.store import MappingStore
from relaychat.ui.helpers import (
    ErrorChangeTracker,
    format_relative_time,
    group_messages_by_turn,
    sort_by_recent,
)
from relaychat.ui.input_bar import InputBarState
from tests.fakes import FakeRelay, always_confirm

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)


class TestGroupMessagesByTurn:
    """Tests for turn grouping."""

    def test_user_message_starts_each_turn(self) -> None:
        messages = [
            create_message("user", "q1"),
            create_message("assistant", "a1"),
            create_message("user", "q2"),
            create_message("assistant", "a2"),
            create_message("assistant", "a2b"),
        ]

        groups = group_messages_by_turn(messages)

        assert [[m.content for m in group] for group in groups] == [
            ["q1", "a1"],
            ["q2", "a2", "a2b"],
        ]

    def test_unanswered_user_message_is_own_turn(self) -> None:
        messages = [create_message("user", "q1"), create_message("user", "q2")]

        assert [len(group) for group in group_messages_by_turn(messages)] == [1, 1]

    def test_leading_assistant_messages_grouped(self) -> None:
        messages = [create_message("assistant", "hello"), create_message("user", "hi")]

        groups = group_messages_by_turn(messages)

        assert [[m.role for m in group] for group in groups] == [["assistant"], ["user"]]

    def test_empty(self) -> None:
        assert group_messages_by_turn([]) == []


class TestFormatRelativeTime:
    """Tests for the sidebar age labels."""

    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            (timedelta(seconds=30), "now"),
            (timedelta(minutes=5), "5m"),
            (timedelta(minutes=59), "59m"),
            (timedelta(hours=3), "3h"),
            (timedelta(days=2), "2d"),
            (timedelta(days=6, hours=23), "6d"),
        ],
    )
    def test_recent(self, delta: timedelta, expected: str) -> None:
        assert format_relative_time(NOW - delta, now=NOW) == expected

    def test_older_than_a_week_shows_date(self) -> None:
        assert format_relative_time(datetime(2024, 3, 4, 9, 0, tzinfo=UTC), now=NOW) == "Mar 4"


def test_sort_by_recent() -> None:
    older = Conversation(title="older", updated_at=NOW - timedelta(days=1))
    newer = Conversation(title="newer", updated_at=NOW)

    assert [c.title for c in sort_by_recent([older, newer])] == ["newer", "older"]


class TestErrorChangeTracker:
    """Tests for announcing each error once."""

    def test_repeated_state_changes_announce_once(self) -> None:
        tracker = ErrorChangeTracker()

        seen = [tracker.is_new(error) for error in ["boom", "boom", "boom"]]

        assert seen == [True, False, False]

    def test_no_error_never_announced(self) -> None:
        tracker = ErrorChangeTracker()

        assert tracker.is_new(None) is False
        assert tracker.is_new("") is False

    def test_new_or_recurring_error_announced_again(self) -> None:
        tracker = ErrorChangeTracker()

        seen = [tracker.is_new(error) for error in ["boom", "bang", None, "bang"]]

        assert seen == [True, True, False, True]


class TestInputBarState:
    """Tests for draft handling and submit gating."""

    @pytest.fixture
    def relay(self) -> FakeRelay:
        return FakeRelay(gate=asyncio.Event())

    @pytest.fixture
    def controller(self, store: MappingStore, relay: FakeRelay) -> ChatController:
        save_flag(store, STREAMING_ENABLED_KEY, False)
        return ChatController(store, relay, always_confirm)

    async def test_blank_draft_not_sent(self, controller: ChatController, relay: FakeRelay) -> None:
        bar = InputBarState(controller)
        bar.text = "   "

        assert await bar.submit() is False
        assert relay.sent == []

    async def test_submit_clears_draft(self, controller: ChatController, relay: FakeRelay) -> None:
        bar = InputBarState(controller)
        bar.text = "  Hello  "
        assert relay.gate is not None
        relay.gate.set()

        assert await bar.submit() is True
        assert bar.text == ""
        assert [m.content for m in relay.sent[0]] == ["Hello"]

    async def test_second_submit_refused_while_loading(
        self, controller: ChatController, relay: FakeRelay
    ) -> None:
        bar = InputBarState(controller)
        bar.text = "first"
        task = asyncio.create_task(bar.submit())
        while not relay.sent:
            await asyncio.sleep(0)

        bar.text = "second"
        assert bar.disabled is True
        assert bar.can_submit is False
        assert await bar.submit() is False

        assert relay.gate is not None
        relay.gate.set()
        await task

        assert len(relay.sent) == 1
        assert bar.text == "second"
        assert bar.can_submit is True

    def test_transcript_appended_to_draft(self, controller: ChatController) -> None:
        bar = InputBarState(controller)

        bar.append_transcript("hello world")
        bar.append_transcript("  again ")
        bar.append_transcript("   ")

        assert bar.text == "hello world again"

    async def test_transcribe_fills_draft(self, controller: ChatController) -> None:
        client = RelayClient(
            base_url="http://relay.test",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"text": "spoken words"})
            ),
        )
        bar = InputBarState(controller)

        await bar.transcribe(client, b"audio", "audio/webm")

        assert bar.text == "spoken words"
        assert bar.is_transcribing is False

    async def test_transcribe_failure_leaves_draft(self, controller: ChatController) -> None:
        client = RelayClient(
            base_url="http://relay.test",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(500, json={"error": "boom"})
            ),
        )
        bar = InputBarState(controller)
        bar.text = "draft"

        await bar.transcribe(client, b"audio", "audio/webm")

        assert bar.text == "draft"
        assert bar.is_transcribing is False
