"""Conversation message models and the persisted snapshot shape.

Field aliases follow the camelCase keys of the stored JSON and the remote
service, so a snapshot written by the browser client loads as is; only its
pending placeholder is dropped on restore.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str
    role: MessageRole
    timestamp: datetime = Field(default_factory=_utcnow)
    is_pending: bool = Field(default=False, alias="isPending")


class ConversationSnapshot(BaseModel):
    """The persisted unit: ordered messages plus the two correlation ids."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[Message]
    session_id: str = Field(alias="sessionId")
    chat_id: Optional[str] = Field(default=None, alias="chatId")


class ConversationView(BaseModel):
    """Read-only state handed to the presentation layer after each change."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[Message]
    is_loading: bool = Field(alias="isLoading")
    session_id: str = Field(alias="sessionId")
    chat_id: Optional[str] = Field(default=None, alias="chatId")
    draft: str = ""
    attached_file_name: Optional[str] = Field(default=None, alias="attachedFileName")

    @property
    def pending_count(self) -> int:
        return sum(1 for m in self.messages if m.is_pending)


def format_timestamp(value: datetime) -> str:
    """Render a message time as HH:MM in local time."""
    return value.astimezone().strftime("%H:%M")
