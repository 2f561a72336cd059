"""Key-value rows backing the local conversation store."""

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class StoredItem(SQLModel, table=True):
    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
