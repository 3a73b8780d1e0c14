from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.deps import get_chat_service
from app.model.chat.chat_request import ChatRequest
from app.model.chat.chat_response import ChatResponse, HealthResponse
from app.model.conversation.conversation_response import HistoryResponse
from app.service.chat.chat import ChatService, history_service, message_service

api_router = APIRouter()


@api_router.post("/chat/message", response_model=ChatResponse)
async def post_message(req: ChatRequest, chat: ChatService = Depends(get_chat_service)):
    return await message_service(req, chat)


@api_router.get("/chat/history/{session_id}", response_model=HistoryResponse)
async def get_history(session_id: str, chat: ChatService = Depends(get_chat_service)):
    return await history_service(session_id, chat)


@api_router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(timestamp=datetime.now(timezone.utc))
