import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_chat_service
from app.db.session import build_engine, build_session_factory, init_db
from app.main import app
from app.service.cache.reply_cache import ReplyCache
from app.service.chat.chat import ChatService
from app.service.conversation.store import ConversationStore


class StubProvider:
    name = "Stub"

    def __init__(self, reply: str = "We offer free shipping on orders over $50."):
        self.reply = reply
        self.error = None
        self.calls = []

    def generate_reply(self, user_message, history):
        self.calls.append((user_message, list(history)))
        if self.error is not None:
            raise self.error
        return self.reply


class StubRedis:
    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.get_calls = 0
        self.set_calls = 0

    def get(self, key):
        self.get_calls += 1
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.set_calls += 1
        self.data[key] = value
        self.ttls[key] = ttl


@pytest.fixture(scope="function")
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'data' / 'chat.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def store(engine):
    return ConversationStore(build_session_factory(engine))


@pytest.fixture(scope="function")
def redis_stub():
    return StubRedis()


@pytest.fixture(scope="function")
def provider():
    return StubProvider()


@pytest.fixture(scope="function")
def chat_service(store, redis_stub, provider):
    return ChatService(store=store, cache=ReplyCache(redis_stub), provider=provider)


#scope : function < class < module < package < session
@pytest.fixture(scope="function")
def client(chat_service):
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    yield TestClient(app)
    app.dependency_overrides.clear()
