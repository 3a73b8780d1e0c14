import threading
import uuid
from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

import app.service.conversation.store as store_module
from app.db.models import Conversation, Message
from app.errors import NotFoundError, StorageError
from app.model.conversation.conversation import Sender
from app.service.conversation.store import ConversationStore


def test_create_and_get_conversation(store):
    conversation_id = store.create_conversation()

    uuid.UUID(conversation_id)
    record = store.get_conversation(conversation_id)
    assert record.id == conversation_id
    assert record.created_at == record.updated_at
    assert record.created_at.tzinfo is not None


def test_get_conversation_absent(store):
    assert store.get_conversation(str(uuid.uuid4())) is None


def test_append_message_advances_updated_at(store):
    conversation_id = store.create_conversation()

    first = store.append_message(conversation_id, Sender.USER, "hello")
    second = store.append_message(conversation_id, Sender.AI, "Hi! How can I help?")

    assert first.conversation_id == conversation_id
    assert first.sender == Sender.USER
    assert second.timestamp > first.timestamp
    record = store.get_conversation(conversation_id)
    assert record.updated_at == second.timestamp
    assert record.updated_at >= record.created_at


def test_append_message_unknown_conversation(store):
    with pytest.raises(NotFoundError):
        store.append_message(str(uuid.uuid4()), Sender.USER, "hello")


def test_list_messages_ordered(store):
    conversation_id = store.create_conversation()
    texts = [f"message {i}" for i in range(6)]
    for i, text in enumerate(texts):
        store.append_message(conversation_id, Sender.USER if i % 2 == 0 else Sender.AI, text)

    messages = store.list_messages(conversation_id)

    assert [m.text for m in messages] == texts
    assert [m.timestamp for m in messages] == sorted(m.timestamp for m in messages)


def test_list_messages_empty(store):
    conversation_id = store.create_conversation()

    assert store.list_messages(conversation_id) == []


def test_sender_constraint_enforced(engine, store):
    conversation_id = store.create_conversation()
    record = store.get_conversation(conversation_id)

    with Session(engine) as db:
        db.add(Message(id="m1", conversation_id=conversation_id, sender="agent", text="x", timestamp=record.created_at.replace(tzinfo=None)))
        with pytest.raises(IntegrityError):
            db.commit()


def test_delete_conversation_cascades(engine, store):
    conversation_id = store.create_conversation()
    store.append_message(conversation_id, Sender.USER, "hello")

    with Session(engine) as db:
        db.delete(db.get(Conversation, conversation_id))
        db.commit()

    with Session(engine) as db:
        assert db.execute(select(Message)).scalars().all() == []


def test_storage_failure_is_wrapped():
    class _BrokenSession:
        def get(self, *_args):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        def rollback(self):
            pass

        def close(self):
            pass

    broken = ConversationStore(lambda: _BrokenSession())

    with pytest.raises(StorageError, match="disk I/O error"):
        broken.get_conversation("anything")


def test_concurrent_appends_never_move_updated_at_backwards(store, monkeypatch):
    conversation_id = store.create_conversation()
    created = store.get_conversation(conversation_id).updated_at.replace(tzinfo=None)
    stamps = {"later": created + timedelta(seconds=2), "earlier": created + timedelta(seconds=1)}
    both_read = threading.Barrier(2, timeout=5)
    later_committed = threading.Event()
    errors = []

    def fake_utcnow():
        # both appends have read the conversation before either writes
        both_read.wait()
        name = threading.current_thread().name
        if name == "earlier":
            later_committed.wait(timeout=5)
        return stamps[name]

    def append():
        try:
            store.append_message(conversation_id, Sender.USER, threading.current_thread().name)
        except Exception as exc:
            errors.append(exc)
        finally:
            if threading.current_thread().name == "later":
                later_committed.set()

    monkeypatch.setattr(store_module, "_utcnow", fake_utcnow)
    threads = [threading.Thread(target=append, name=name) for name in ("later", "earlier")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert errors == []
    newest = max(m.timestamp for m in store.list_messages(conversation_id))
    updated_at = store.get_conversation(conversation_id).updated_at
    assert updated_at >= newest
    assert updated_at.replace(tzinfo=None) == stamps["later"]


def test_storage_failure_is_not_logged_by_the_store(caplog):
    class _BrokenSession:
        def get(self, *_args):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        def rollback(self):
            pass

        def close(self):
            pass

    broken = ConversationStore(lambda: _BrokenSession())

    with pytest.raises(StorageError):
        broken.get_conversation("anything")

    assert [r for r in caplog.records if r.name == store_module.__name__] == []
