"""Key/value store abstraction for client-side durable state.

The chat page persists into NiceGUI's per-browser ``app.storage.user``;
tests use a plain dict. Both are wrapped by ``MappingStore``.
"""

from collections.abc import MutableMapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """String-keyed, string-valued durable storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MappingStore:
    """KeyValueStore over any mutable mapping.

    Args:
        mapping: Backing mapping. A fresh dict is used when omitted, which
            makes this the in-memory store.
    """

    def __init__(self, mapping: MutableMapping[str, str] | None = None) -> None:
        self._mapping: MutableMapping[str, str] = {} if mapping is None else mapping

    def get_item(self, key: str) -> str | None:
        return self._mapping.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._mapping[key] = value

    def remove_item(self, key: str) -> None:
        self._mapping.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._mapping
