"""Abstract key-value store interface. All local storage backends implement this."""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised when a backend cannot read or write an item."""


class BaseKeyValueStore(ABC):
    """Synchronous string store, one writer, keyed like browser local storage."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is missing."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key. Removing a missing key is not an error."""
        ...
