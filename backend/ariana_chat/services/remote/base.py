"""Abstract remote conversation client. All conversation backends implement this."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class RemoteReply:
    text: str
    chat_id: str
    session_id: str
    chat_message_id: str = ""
    ok: bool = True


class BaseConversationClient(ABC):
    @abstractmethod
    async def query(self, question: str, chat_id: str | None, session_id: str) -> RemoteReply:
        """Send one question and return the reply.

        Must not raise: failures come back as a reply with ``ok=False``.
        """
        ...
