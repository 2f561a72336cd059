"""Local storage backend factory."""

from ariana_chat.core.config import settings
from ariana_chat.services.storage.base import BaseKeyValueStore


def get_key_value_store() -> BaseKeyValueStore:
    """Factory function that returns the configured storage backend."""
    if settings.storage_backend == "sqlite":
        from ariana_chat.services.storage.sqlite_store import SqliteKeyValueStore
        return SqliteKeyValueStore()
    elif settings.storage_backend == "file":
        from ariana_chat.services.storage.file_store import JsonFileKeyValueStore
        return JsonFileKeyValueStore(settings.storage_file)
    elif settings.storage_backend == "memory":
        from ariana_chat.services.storage.memory_store import MemoryKeyValueStore
        return MemoryKeyValueStore()
    else:
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
