"""
backend/softwarepros/core/redis.py

Optional Async Redis Client

Lazily creates a redis.asyncio client from REDIS_URL. Redis is not required
by any request path; it is only pinged by the health check.
"""

import logging

import redis.asyncio as redis

from softwarepros.core.config import settings

# ---------------------------------------------------
# Logger Configuration
# ---------------------------------------------------
logger = logging.getLogger(__name__)

_redis_client: redis.Redis | None = None  # type: ignore[type-arg]


def get_redis_client() -> redis.Redis | None:  # type: ignore[type-arg]
    """Returns the shared client, or None when REDIS_URL is not configured."""
    global _redis_client
    if not settings.REDIS_URL:
        return None
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL, decode_responses=True, socket_connect_timeout=5
        )
        logger.info("[REDIS ASYNC] Initialized async Redis client")
    return _redis_client


async def ping_redis() -> bool:
    """True when Redis answers PING."""
    client = get_redis_client()
    if client is None:
        return False
    try:
        return bool(await client.ping())
    except redis.RedisError as e:
        logger.error(f"[REDIS ASYNC] Connection test failed: {e}")
        return False


async def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
