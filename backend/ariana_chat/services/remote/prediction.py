"""Client for the hosted prediction endpoint that produces assistant replies."""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ariana_chat.core.config import settings
from ariana_chat.services.remote.base import BaseConversationClient, RemoteReply

logger = logging.getLogger(__name__)


class PredictionResponse(BaseModel):
    """Fields of the endpoint's reply that the chat reads; the rest are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: str
    chat_id: Optional[str] = Field(default=None, alias="chatId")
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    chat_message_id: Optional[str] = Field(default=None, alias="chatMessageId")


class PredictionClient(BaseConversationClient):
    """Posts one question per call. Never retries; every failure becomes an apology reply."""

    def __init__(
        self,
        url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        error_reply: str | None = None,
    ):
        self._url = url or settings.prediction_url
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._error_reply = error_reply or settings.error_reply

    def _payload(self, question: str, chat_id: str | None, session_id: str) -> dict[str, Any]:
        payload: dict[str, Any] = {"question": question}
        if chat_id:
            payload["chatId"] = chat_id
        payload["overrideConfig"] = {"sessionId": session_id}
        return payload

    async def query(self, question: str, chat_id: str | None, session_id: str) -> RemoteReply:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                resp = await client.post(
                    self._url,
                    headers={"Content-Type": "application/json"},
                    json=self._payload(question, chat_id, session_id),
                )
                resp.raise_for_status()
                result = PredictionResponse.model_validate(resp.json())
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError covers both undecodable JSON and pydantic's ValidationError
            logger.warning("Prediction request failed: %s", e)
            return RemoteReply(
                text=self._error_reply,
                chat_id=chat_id or "",
                session_id=session_id,
                ok=False,
            )

        logger.debug("Prediction reply for chat %s (%d chars)", result.chat_id, len(result.text))
        return RemoteReply(
            text=result.text,
            chat_id=result.chat_id or "",
            session_id=result.session_id or "",
            chat_message_id=result.chat_message_id or "",
        )
