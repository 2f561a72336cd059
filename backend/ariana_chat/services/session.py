"""Session manager - owns the conversation and runs one chat turn at a time.

A turn moves through these states, each published to listeners before the
next step runs so the pending placeholder is visible during the network wait:

    idle -> user message appended -> placeholder appended (loading)
         -> reply or apology received -> placeholder replaced -> idle

The manager is the only writer of the persisted snapshot.
"""

import logging
from typing import Callable

from ariana_chat.core.config import settings
from ariana_chat.models.message import (
    ConversationSnapshot,
    ConversationView,
    Message,
    MessageRole,
)
from ariana_chat.services.identity import generate_id
from ariana_chat.services.persistence import ConversationPersistence, LoadStatus
from ariana_chat.services.remote.base import BaseConversationClient

logger = logging.getLogger(__name__)

WELCOME_MESSAGE_ID = "welcome"

Listener = Callable[[ConversationView], None]


class SessionManager:
    def __init__(
        self,
        client: BaseConversationClient,
        persistence: ConversationPersistence,
        welcome_message: str | None = None,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._client = client
        self._persistence = persistence
        self._welcome_message = welcome_message or settings.welcome_message
        self._new_id = id_factory

        self._messages: list[Message] = []
        self._session_id = ""
        self._chat_id: str | None = None
        self._is_loading = False
        self._draft = ""
        self._attached_file: str | None = None
        # Bumped by clear() so a reply to an erased conversation is dropped
        self._generation = 0
        self._listeners: list[Listener] = []

    # --- read-only state ---

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def chat_id(self) -> str | None:
        return self._chat_id

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def snapshot(self) -> ConversationSnapshot:
        return ConversationSnapshot(
            messages=list(self._messages),
            session_id=self._session_id,
            chat_id=self._chat_id,
        )

    def view(self) -> ConversationView:
        return ConversationView(
            messages=list(self._messages),
            is_loading=self._is_loading,
            session_id=self._session_id,
            chat_id=self._chat_id,
            draft=self._draft,
            attached_file_name=self._attached_file,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- lifecycle ---

    def initialize(self) -> None:
        """Restore the stored conversation, or start a fresh one."""
        result = self._persistence.load()

        if result.status == LoadStatus.LOADED and result.snapshot and any(
            not m.is_pending for m in result.snapshot.messages
        ):
            snapshot = result.snapshot
            self._messages = [m for m in snapshot.messages if not m.is_pending]
            self._session_id = snapshot.session_id
            self._chat_id = snapshot.chat_id
            self._is_loading = False
            logger.debug(
                "Restored %d messages for session %s", len(self._messages), self._session_id
            )
            self._publish()
            return

        if result.status == LoadStatus.CORRUPT:
            logger.warning("Stored conversation is unreadable, starting fresh")
        self._start_fresh()

    def clear(self) -> None:
        """Erase the stored conversation and start over with a new session id."""
        self._persistence.clear()
        self._generation += 1
        self._draft = ""
        self._attached_file = None
        self._start_fresh()

    def _start_fresh(self) -> None:
        self._session_id = self._new_id()
        self._chat_id = None
        self._is_loading = False
        self._messages = [
            Message(
                id=WELCOME_MESSAGE_ID,
                content=self._welcome_message,
                role=MessageRole.ASSISTANT,
            )
        ]
        logger.debug("Started session %s", self._session_id)
        self._changed()

    # --- compose state ---

    def set_draft(self, text: str) -> None:
        self._draft = text
        self._publish()

    def attach_file(self, file_name: str) -> None:
        self._attached_file = file_name
        self._publish()

    def detach_file(self) -> None:
        self._attached_file = None
        self._publish()

    # --- chat turn ---

    async def send(self, text: str | None = None, file_name: str | None = None) -> Message | None:
        """Run one chat turn and return the finalized assistant message.

        Without arguments the current draft and attachment are sent. Returns
        None without touching state when there is nothing to send or when a
        reply is still pending.
        """
        if text is None:
            text = self._draft
        if file_name is None:
            file_name = self._attached_file

        if not text.strip() and not file_name:
            return None
        if self._is_loading:
            logger.warning("Ignoring send while a reply is pending")
            return None

        content = text
        if file_name:
            # Only the name travels; the file contents are never uploaded
            content += f"\n[Attached file: {file_name}]"

        self._messages.append(Message(id=self._new_id(), content=content, role=MessageRole.USER))
        self._changed()

        pending_id = f"{self._new_id()}-pending"
        self._messages.append(
            Message(id=pending_id, content="", role=MessageRole.ASSISTANT, is_pending=True)
        )
        self._is_loading = True
        self._draft = ""
        self._attached_file = None
        self._changed()

        generation = self._generation
        try:
            reply = await self._client.query(content, self._chat_id, self._session_id)
        except BaseException:
            if generation == self._generation:
                self._drop_pending(pending_id)
                self._changed()
            raise

        if generation != self._generation:
            logger.info("Dropping reply for a conversation that was cleared")
            return None

        self._drop_pending(pending_id)
        # A service-assigned id always replaces the one held locally
        if reply.chat_id:
            self._chat_id = reply.chat_id
        if reply.session_id:
            self._session_id = reply.session_id

        answer = Message(
            id=reply.chat_message_id or self._new_id(),
            content=reply.text,
            role=MessageRole.ASSISTANT,
        )
        self._messages.append(answer)
        self._changed()
        return answer

    def _drop_pending(self, pending_id: str) -> None:
        self._messages = [m for m in self._messages if m.id != pending_id]
        self._is_loading = False

    # --- notification ---

    def _changed(self) -> None:
        if self._messages:
            self._persistence.save(self.snapshot())
        self._publish()

    def _publish(self) -> None:
        if not self._listeners:
            return
        view = self.view()
        for listener in list(self._listeners):
            listener(view)
