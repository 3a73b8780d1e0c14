from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.config.config import MAX_MESSAGE_LENGTH


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH, description="User's message to the support agent")
    session_id: Optional[UUID] = Field(None, alias="sessionId", description="Existing conversation to continue")
