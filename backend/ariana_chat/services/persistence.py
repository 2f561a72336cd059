"""Persists the conversation snapshot under a single fixed key."""

import logging
from dataclasses import dataclass
from enum import Enum

from pydantic import ValidationError

from ariana_chat.models.message import ConversationSnapshot
from ariana_chat.services.storage.base import BaseKeyValueStore, StorageError

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    ABSENT = "absent"
    LOADED = "loaded"
    CORRUPT = "corrupt"


@dataclass
class LoadResult:
    status: LoadStatus
    snapshot: ConversationSnapshot | None = None
    error: str | None = None


class ConversationPersistence:
    """Reads and writes the conversation snapshot through a key-value store.

    ``load`` never raises: a missing key, a readable snapshot and an
    unreadable one are reported as three distinct ``LoadResult`` outcomes.
    Pending placeholders are dropped on save and on load, so callers only
    ever see finalized messages.
    """

    def __init__(self, store: BaseKeyValueStore, key: str = "chatStorage"):
        self._store = store
        self._key = key

    def save(self, snapshot: ConversationSnapshot) -> bool:
        finalized = snapshot.model_copy(
            update={"messages": [m for m in snapshot.messages if not m.is_pending]}
        )
        try:
            self._store.set_item(self._key, finalized.model_dump_json(by_alias=True))
        except StorageError:
            logger.exception("Failed to save conversation snapshot")
            return False
        return True

    def load(self) -> LoadResult:
        try:
            raw = self._store.get_item(self._key)
        except StorageError as e:
            logger.warning("Failed to read conversation snapshot: %s", e)
            return LoadResult(LoadStatus.CORRUPT, error=str(e))

        if raw is None:
            return LoadResult(LoadStatus.ABSENT)

        try:
            snapshot = ConversationSnapshot.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable conversation snapshot: %s", e)
            return LoadResult(LoadStatus.CORRUPT, error=str(e))
        dropped = sum(1 for m in snapshot.messages if m.is_pending)
        if dropped:
            # Older writers stored the placeholder of an unfinished turn
            logger.info("Dropping %d pending placeholder(s) from stored snapshot", dropped)
            snapshot.messages = [m for m in snapshot.messages if not m.is_pending]
        return LoadResult(LoadStatus.LOADED, snapshot=snapshot)

    def clear(self) -> None:
        try:
            self._store.remove_item(self._key)
        except StorageError:
            logger.exception("Failed to remove conversation snapshot")
