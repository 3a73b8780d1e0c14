import asyncio
import logging
from typing import Optional
from uuid import UUID

from app.client.llm.base import ReplyProvider
from app.errors import NotFoundError, StorageError
from app.model.chat.chat_request import ChatRequest
from app.model.chat.chat_response import ChatResponse
from app.model.conversation.conversation import Sender
from app.model.conversation.conversation_response import HistoryResponse, MessageItem
from app.service.cache.reply_cache import ReplyCache
from app.service.conversation.store import ConversationStore

logger = logging.getLogger(__name__)


def _preview(text: str, limit: int = 50) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


class ChatService:
    """Runs one user turn: persistence, first-turn cache and reply generation.

    Store, cache and provider calls block, so each one runs in a worker thread.
    """

    def __init__(self, store: ConversationStore, cache: ReplyCache, provider: ReplyProvider):
        self.store = store
        self.cache = cache
        self.provider = provider

    async def resolve_conversation(self, session_id: Optional[UUID]) -> str:
        if session_id is not None:
            existing = await asyncio.to_thread(self.store.get_conversation, str(session_id))
            if existing is not None:
                return existing.id

        conversation_id = await asyncio.to_thread(self.store.create_conversation)
        logger.info("New conversation created: %s", conversation_id)
        return conversation_id

    async def handle_turn(self, conversation_id: str, user_message: str) -> str:
        await asyncio.to_thread(self.store.append_message, conversation_id, Sender.USER, user_message)
        logger.info('User message saved: "%s"', _preview(user_message))

        history = await asyncio.to_thread(self.store.list_messages, conversation_id)
        first_turn = len(history) == 1

        reply = None
        if first_turn:
            reply = await asyncio.to_thread(self.cache.get, user_message)
            if reply:
                logger.info("Cache hit for conversation %s", conversation_id)

        from_cache = bool(reply)
        if not from_cache:
            # the provider sees prior turns only, not the message just stored
            reply = await asyncio.to_thread(self.provider.generate_reply, user_message, history[:-1])

        await asyncio.to_thread(self.store.append_message, conversation_id, Sender.AI, reply)
        logger.info('AI reply saved: "%s"', _preview(reply))

        if first_turn and not from_cache:
            await asyncio.to_thread(self.cache.set, user_message, reply)
        return reply


async def message_service(req: ChatRequest, chat: ChatService) -> ChatResponse:
    conversation_id = await chat.resolve_conversation(req.session_id)
    try:
        reply = await chat.handle_turn(conversation_id, req.message)
    except NotFoundError as exc:
        # the conversation was resolved a moment ago; losing it is a storage fault
        raise StorageError(f"Conversation {conversation_id} disappeared while saving the message") from exc
    return ChatResponse(reply=reply, session_id=conversation_id)


async def history_service(session_id: str, chat: ChatService) -> HistoryResponse:
    conversation = await asyncio.to_thread(chat.store.get_conversation, session_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")

    messages = await asyncio.to_thread(chat.store.list_messages, conversation.id)
    return HistoryResponse(messages=[MessageItem.from_record(m) for m in messages])
