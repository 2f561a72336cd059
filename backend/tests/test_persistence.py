"""Tests for saving and restoring the conversation snapshot."""

import json
from datetime import datetime, timezone

from ariana_chat.models.message import ConversationSnapshot, Message, MessageRole
from ariana_chat.services.persistence import ConversationPersistence, LoadStatus
from ariana_chat.services.storage.base import BaseKeyValueStore, StorageError
from ariana_chat.services.storage.sqlite_store import SqliteKeyValueStore


def _snapshot(chat_id="chat-9"):
    return ConversationSnapshot(
        messages=[
            Message(
                id="welcome",
                content="Hello!",
                role=MessageRole.ASSISTANT,
                timestamp=datetime(2025, 3, 1, 9, 30, 15, 123000, tzinfo=timezone.utc),
            ),
            Message(
                id="lx1abc",
                content="Can you help me?\n[Attached file: plan.pdf]",
                role=MessageRole.USER,
                timestamp=datetime(2025, 3, 1, 9, 31, tzinfo=timezone.utc),
            ),
        ],
        session_id="sess-1",
        chat_id=chat_id,
    )


class BrokenStore(BaseKeyValueStore):
    def get_item(self, key):
        raise StorageError("disk gone")

    def set_item(self, key, value):
        raise StorageError("disk full")

    def remove_item(self, key):
        raise StorageError("disk gone")


def test_load_absent(persistence):
    result = persistence.load()
    assert result.status == LoadStatus.ABSENT
    assert result.snapshot is None


def test_round_trip(persistence):
    original = _snapshot()
    assert persistence.save(original) is True

    result = persistence.load()
    assert result.status == LoadStatus.LOADED
    restored = result.snapshot
    assert restored.session_id == "sess-1"
    assert restored.chat_id == "chat-9"
    assert [(m.id, m.content, m.role) for m in restored.messages] == [
        (m.id, m.content, m.role) for m in original.messages
    ]
    assert [m.timestamp for m in restored.messages] == [m.timestamp for m in original.messages]


def test_round_trip_without_chat_id(persistence):
    persistence.save(_snapshot(chat_id=None))
    assert persistence.load().snapshot.chat_id is None


def test_round_trip_on_sqlite(sqlite_engine):
    persistence = ConversationPersistence(SqliteKeyValueStore(sqlite_engine))
    persistence.save(_snapshot())
    restored = persistence.load().snapshot
    assert restored.session_id == "sess-1"
    assert len(restored.messages) == 2


def test_saved_json_uses_camel_case_keys(persistence, store):
    persistence.save(_snapshot())
    data = json.loads(store.get_item("chatStorage"))
    assert set(data) == {"messages", "sessionId", "chatId"}
    assert data["messages"][0]["role"] == "assistant"
    assert data["messages"][0]["timestamp"].startswith("2025-03-01T09:30:15.123")


def test_loads_snapshot_written_by_browser_client(persistence, store):
    store.set_item(
        "chatStorage",
        json.dumps({
            "messages": [
                {"id": "welcome", "content": "Hi", "role": "assistant",
                 "timestamp": "2025-03-01T09:30:00.000Z"},
                {"id": "1740821460000", "content": "hello", "role": "user",
                 "timestamp": "2025-03-01T09:31:00.000Z"},
            ],
            "sessionId": "m7abc",
            "chatId": None,
        }),
    )
    result = persistence.load()
    assert result.status == LoadStatus.LOADED
    assert result.snapshot.messages[1].timestamp == datetime(2025, 3, 1, 9, 31, tzinfo=timezone.utc)
    assert result.snapshot.messages[1].is_pending is False


def test_pending_placeholder_is_not_saved(persistence):
    snapshot = _snapshot()
    snapshot.messages.append(
        Message(id="x-pending", content="", role=MessageRole.ASSISTANT, is_pending=True)
    )
    persistence.save(snapshot)
    restored = persistence.load().snapshot
    assert [m.id for m in restored.messages] == ["welcome", "lx1abc"]
    # the caller's snapshot is left alone
    assert snapshot.messages[-1].is_pending


def test_load_drops_pending_placeholder_left_by_browser_client(persistence, store):
    store.set_item(
        "chatStorage",
        json.dumps({
            "messages": [
                {"id": "1", "content": "hello", "role": "user",
                 "timestamp": "2025-03-01T09:31:00.000Z"},
                {"id": "1-pending", "content": "", "role": "assistant",
                 "timestamp": "2025-03-01T09:31:00.000Z", "isPending": True},
            ],
            "sessionId": "s",
            "chatId": None,
        }),
    )
    result = persistence.load()
    assert result.status == LoadStatus.LOADED
    assert [m.id for m in result.snapshot.messages] == ["1"]


def test_invalid_json_is_corrupt(persistence, store):
    store.set_item("chatStorage", "{not json")
    result = persistence.load()
    assert result.status == LoadStatus.CORRUPT
    assert result.snapshot is None
    assert result.error


def test_missing_messages_field_is_corrupt(persistence, store):
    store.set_item("chatStorage", json.dumps({"sessionId": "s", "chatId": None}))
    assert persistence.load().status == LoadStatus.CORRUPT


def test_bad_role_is_corrupt(persistence, store):
    store.set_item(
        "chatStorage",
        json.dumps({
            "messages": [{"id": "1", "content": "x", "role": "system",
                          "timestamp": "2025-03-01T09:30:00Z"}],
            "sessionId": "s",
            "chatId": None,
        }),
    )
    assert persistence.load().status == LoadStatus.CORRUPT


def test_clear_removes_key(persistence, store):
    persistence.save(_snapshot())
    persistence.clear()
    assert store.get_item("chatStorage") is None
    assert persistence.load().status == LoadStatus.ABSENT


def test_storage_failures_do_not_raise():
    persistence = ConversationPersistence(BrokenStore())
    assert persistence.save(_snapshot()) is False
    assert persistence.load().status == LoadStatus.CORRUPT
    persistence.clear()
