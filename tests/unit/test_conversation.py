"""Unit tests for conversation and message models."""

from datetime import UTC, datetime

import pytest_check as check

from relaychat.models.conversation import (
    DEFAULT_TITLE,
    Conversation,
    create_conversation,
    create_message,
    derive_title,
)


class TestDeriveTitle:
    """Tests for title derivation from the first user message."""

    def test_short_content_kept_verbatim(self) -> None:
        assert derive_title("Hello") == "Hello"

    def test_exactly_thirty_characters_not_truncated(self) -> None:
        content = "a" * 30

        assert derive_title(content) == content

    def test_long_content_truncated_with_ellipsis(self) -> None:
        content = "Explain the difference between TCP and UDP please"

        title = derive_title(content)

        assert title == "Explain the difference between..."
        assert len(title) == 33


class TestFactories:
    """Tests for conversation and message constructors."""

    def test_new_conversation_is_empty_and_titled(self) -> None:
        conversation = create_conversation()

        check.equal(conversation.title, DEFAULT_TITLE)
        check.is_true(conversation.is_empty)
        check.equal(conversation.created_at, conversation.updated_at)
        check.equal(conversation.created_at.tzinfo, UTC)

    def test_ids_are_unique(self) -> None:
        ids = {create_conversation().id for _ in range(50)}
        ids |= {create_message("user", "x").id for _ in range(50)}

        assert len(ids) == 100

    def test_touch_advances_updated_at(self) -> None:
        conversation = create_conversation()
        conversation.updated_at = datetime(2020, 1, 1, tzinfo=UTC)

        conversation.touch()

        assert conversation.updated_at > datetime(2020, 1, 1, tzinfo=UTC)


class TestSerialization:
    """Tests for the persisted JSON shape."""

    def test_dumps_camel_case_timestamps(self) -> None:
        conversation = create_conversation("Trip ideas")

        data = conversation.model_dump(by_alias=True, mode="json")

        assert set(data) == {"id", "title", "messages", "createdAt", "updatedAt"}
        assert isinstance(data["createdAt"], str)

    def test_round_trip_preserves_fields(self) -> None:
        conversation = create_conversation("Trip ideas")
        conversation.messages.append(create_message("user", "Where to?"))
        conversation.messages.append(create_message("assistant", "Lisbon."))

        restored = Conversation.model_validate_json(conversation.model_dump_json(by_alias=True))

        assert restored == conversation
        assert restored.messages[1].role == "assistant"

    def test_accepts_field_names_and_aliases(self) -> None:
        moment = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

        by_alias = Conversation(id="c1", createdAt=moment, updatedAt=moment)
        by_name = Conversation(id="c1", created_at=moment, updated_at=moment)

        assert by_alias == by_name
