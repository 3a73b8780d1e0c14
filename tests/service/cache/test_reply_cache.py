from redis.exceptions import ConnectionError as RedisConnectionError

from app.service.cache.reply_cache import ReplyCache, cache_key


class _BrokenRedis:
    def get(self, _key):
        raise RedisConnectionError("connection refused")

    def setex(self, _key, _ttl, _value):
        raise RedisConnectionError("connection refused")


def test_cache_key_normalizes_case_and_whitespace():
    assert cache_key("Return policy?") == cache_key("  return POLICY? \n")
    assert cache_key("Return policy?") != cache_key("Return policy")
    assert cache_key("hi").startswith("chat:")
    assert len(cache_key("hi")) == len("chat:") + 64


def test_set_then_get(redis_stub):
    cache = ReplyCache(redis_stub)

    cache.set("Return policy?", "30 days.")

    assert cache.get("return policy?") == "30 days."
    assert redis_stub.ttls[cache_key("Return policy?")] == 3600


def test_get_miss(redis_stub):
    assert ReplyCache(redis_stub).get("anything") is None


def test_disabled_cache_is_a_noop():
    cache = ReplyCache(None)

    cache.set("hello", "world")

    assert cache.enabled is False
    assert cache.get("hello") is None


def test_redis_errors_are_absorbed(caplog):
    cache = ReplyCache(_BrokenRedis())

    assert cache.get("hello") is None
    cache.set("hello", "world")

    assert "Cache get error" in caplog.text
    assert "Cache set error" in caplog.text
