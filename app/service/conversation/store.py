from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional

from sqlalchemy import DateTime, case, literal, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.db.models import Conversation, Message
from app.errors import NotFoundError, StorageError
from app.model.conversation.conversation import ConversationRecord, MessageRecord, Sender

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    # stored naive, interpreted as UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ConversationStore:
    """SQLite-backed record of conversations and their messages.

    ORM rows never escape this class: every read is converted into a
    ``ConversationRecord`` / ``MessageRecord`` before it is returned.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError(f"Storage error: {exc}") from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def create_conversation(self) -> str:
        conversation_id = str(uuid.uuid4())
        now = _utcnow()
        with self._transaction() as db:
            db.add(Conversation(id=conversation_id, created_at=now, updated_at=now))
        logger.info("Conversation persisted: %s", conversation_id)
        return conversation_id

    def get_conversation(self, conversation_id: str) -> Optional[ConversationRecord]:
        with self._transaction() as db:
            row = db.get(Conversation, conversation_id)
            if row is None:
                return None
            return ConversationRecord.model_validate(row)

    def append_message(self, conversation_id: str, sender: Sender, text: str) -> MessageRecord:
        """Insert a message and advance the conversation's ``updated_at``.

        Both writes share one transaction. The timestamp is nudged forward when
        the clock has not moved past the previous write so ordering within a
        conversation stays strict. ``updated_at`` only ever moves forward, even
        when a concurrent append with a later timestamp commits first.
        """
        with self._transaction() as db:
            conversation = db.get(Conversation, conversation_id)
            if conversation is None:
                raise NotFoundError("Conversation not found")

            timestamp = _utcnow()
            if timestamp <= conversation.updated_at:
                timestamp = conversation.updated_at + timedelta(microseconds=1)

            message = Message(
                id=str(uuid.uuid4()),
                conversation_id=conversation_id,
                sender=Sender(sender).value,
                text=text,
                timestamp=timestamp,
            )
            db.add(message)
            db.flush()
            stamp = literal(timestamp, DateTime)
            db.execute(
                update(Conversation)
                .where(Conversation.id == conversation_id)
                .values(updated_at=case((Conversation.updated_at < stamp, stamp), else_=Conversation.updated_at))
                .execution_options(synchronize_session=False)
            )
            record = MessageRecord.model_validate(message)

        logger.info("Message persisted: %s -> conversation %s...", record.sender.value, conversation_id[:8])
        return record

    def list_messages(self, conversation_id: str) -> List[MessageRecord]:
        with self._transaction() as db:
            rows = db.execute(
                select(Message)
                .where(Message.conversation_id == conversation_id)
                .order_by(Message.timestamp.asc())
            ).scalars().all()
            return [MessageRecord.model_validate(row) for row in rows]
