"""Local storage on SQLite, one row per key."""

import logging
from datetime import datetime, timezone

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ariana_chat.models.storage import StoredItem
from ariana_chat.services.storage.base import BaseKeyValueStore, StorageError

logger = logging.getLogger(__name__)


class SqliteKeyValueStore(BaseKeyValueStore):
    """Key-value store backed by the ``storeditem`` table."""

    def __init__(self, engine: Engine | None = None):
        if engine is None:
            from ariana_chat.core.database import engine as default_engine
            engine = default_engine
        self._engine = engine

    def get_item(self, key: str) -> str | None:
        try:
            with Session(self._engine) as session:
                item = session.get(StoredItem, key)
                return item.value if item else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            with Session(self._engine) as session:
                item = session.get(StoredItem, key)
                if item:
                    item.value = value
                    item.updated_at = datetime.now(timezone.utc)
                else:
                    item = StoredItem(key=key, value=value)
                session.add(item)
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with Session(self._engine) as session:
                item = session.get(StoredItem, key)
                if item:
                    session.delete(item)
                    session.commit()
                    logger.debug(f"Removed stored item {key}")
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove {key!r}: {e}") from e
