from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.model.conversation.conversation import MessageRecord, Sender


class MessageItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    conversation_id: str = Field(..., alias="conversationId")
    sender: Sender
    text: str
    timestamp: datetime

    @classmethod
    def from_record(cls, record: MessageRecord) -> "MessageItem":
        return cls(
            id=record.id,
            conversation_id=record.conversation_id,
            sender=record.sender,
            text=record.text,
            timestamp=record.timestamp,
        )


class HistoryResponse(BaseModel):
    messages: List[MessageItem]
