"""Rendering helpers with no NiceGUI dependency."""

from datetime import UTC, datetime

from relaychat.models.conversation import Conversation, Message


def group_messages_by_turn(messages: list[Message]) -> list[list[Message]]:
    """Split messages into turns.

    A turn is a user message followed by the assistant replies after it.
    Assistant messages before the first user message form their own group.
    """
    groups: list[list[Message]] = []
    current: list[Message] = []

    for message in messages:
        if message.role == "user":
            if current:
                groups.append(current)
            current = [message]
        else:
            current.append(message)

    if current:
        groups.append(current)
    return groups


def sort_by_recent(conversations: list[Conversation]) -> list[Conversation]:
    return sorted(conversations, key=lambda c: c.updated_at, reverse=True)


def format_relative_time(moment: datetime, now: datetime | None = None) -> str:
    """Compact age label for the sidebar: now, 5m, 3h, 2d or ``Mar 4``."""
    now = now or datetime.now(UTC)
    seconds = (now - moment).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "now"
    if minutes < 60:
        return f"{minutes}m"
    if hours < 24:
        return f"{hours}h"
    if days < 7:
        return f"{days}d"
    return f"{moment:%b} {moment.day}"


def format_clock(moment: datetime) -> str:
    return moment.astimezone().strftime("%I:%M %p")


class ErrorChangeTracker:
    """Remembers the last error shown so it is announced once per occurrence."""

    def __init__(self) -> None:
        self._last: str | None = None

    def is_new(self, error: str | None) -> bool:
        """True when ``error`` is set and differs from the last one seen."""
        previous, self._last = self._last, error
        return bool(error) and error != previous
