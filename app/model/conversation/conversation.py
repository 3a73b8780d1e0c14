from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config.config import MAX_MESSAGE_LENGTH


class Sender(str, Enum):
    USER = "user"
    # the support agent's side of the conversation
    AI = "ai"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ConversationRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class MessageRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    conversation_id: str
    sender: Sender
    text: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def to_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)
