import hashlib
import logging
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from app.config.config import CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


def cache_key(user_message: str) -> str:
    normalized = user_message.lower().strip()
    digest = hashlib.sha256(normalized.encode("utf-8")).hexdigest()
    return f"chat:{digest}"


class ReplyCache:
    """Best-effort cache of first-turn replies; never raises."""

    def __init__(self, redis_client: Optional[Redis], ttl_seconds: int = CACHE_TTL_SECONDS):
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    @property
    def enabled(self) -> bool:
        return self._redis is not None

    def get(self, user_message: str) -> Optional[str]:
        if self._redis is None:
            return None
        try:
            return self._redis.get(cache_key(user_message))
        except RedisError as exc:
            logger.warning("Cache get error: %s", exc)
            return None

    def set(self, user_message: str, reply: str, ttl_seconds: Optional[int] = None) -> None:
        if self._redis is None:
            return
        try:
            self._redis.setex(cache_key(user_message), ttl_seconds or self._ttl_seconds, reply)
        except RedisError as exc:
            logger.warning("Cache set error: %s", exc)
