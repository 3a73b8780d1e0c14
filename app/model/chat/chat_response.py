from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reply: str = Field(..., description="Support agent's reply to the user's message")
    session_id: str = Field(..., alias="sessionId", description="Conversation the reply belongs to")


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime
