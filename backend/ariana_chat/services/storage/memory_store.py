"""In-process key-value store. Nothing survives a restart."""

from ariana_chat.services.storage.base import BaseKeyValueStore


class MemoryKeyValueStore(BaseKeyValueStore):
    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
