import logging
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from app.config.config import Settings

logger = logging.getLogger(__name__)


def _connect(settings: Settings) -> Redis:
    if settings.redis_url:
        return Redis.from_url(settings.redis_url, decode_responses=True)
    return Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        username=settings.redis_username,
        password=settings.redis_password,
        decode_responses=True,
    )


def build_redis_client(settings: Settings) -> Optional[Redis]:
    """Connect to Redis, or return None when caching is not configured or unreachable."""
    if not (settings.redis_url or (settings.redis_host and settings.redis_port)):
        logger.info("Redis: not configured (caching disabled)")
        return None

    try:
        client = _connect(settings)
    except (RedisError, ValueError) as exc:
        logger.warning("Redis: invalid configuration (caching disabled): %s", exc)
        return None

    try:
        client.ping()
    except RedisError as exc:
        logger.warning("Redis: connection failed (caching disabled): %s", exc)
        client.close()
        return None

    logger.info("Redis: connected")
    return client
