"""Shared test fixtures for the chat client tests."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from ariana_chat.core.config import settings
from ariana_chat.core.database import init_db
from ariana_chat.services.persistence import ConversationPersistence
from ariana_chat.services.remote.base import BaseConversationClient, RemoteReply
from ariana_chat.services.session import SessionManager
from ariana_chat.services.storage.memory_store import MemoryKeyValueStore


class FakeConversationClient(BaseConversationClient):
    """Records every query and answers from a queue of canned replies."""

    def __init__(self):
        self.calls: list[dict] = []
        self.replies: list[RemoteReply] = []
        self.gate: asyncio.Event | None = None

    async def query(self, question, chat_id, session_id):
        self.calls.append({"question": question, "chat_id": chat_id, "session_id": session_id})
        if self.gate is not None:
            await self.gate.wait()
        if self.replies:
            return self.replies.pop(0)
        return RemoteReply(text="Hello from assistant", chat_id="chat-1", session_id=session_id)


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite shared across connections, tables created per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def persistence(store):
    return ConversationPersistence(store, key="chatStorage")


@pytest.fixture
def fake_client():
    return FakeConversationClient()


@pytest.fixture
def manager(fake_client, persistence):
    return SessionManager(fake_client, persistence, welcome_message="Hi, I'm Ariana.")


@pytest.fixture
def client(manager, monkeypatch):
    """FastAPI TestClient wired to the fake-backed session manager."""
    monkeypatch.setattr(settings, "storage_backend", "memory")

    from ariana_chat.main import app

    app.state.session_manager = manager
    with TestClient(app) as c:
        yield c
    app.state.session_manager = None
