"""Redis client lifecycle management."""

import redis.asyncio as redis
import structlog

from agentchat.core.config import settings

logger = structlog.get_logger()

redis_client: redis.Redis | None = None  # type: ignore[type-arg]


async def init_redis() -> redis.Redis:  # type: ignore[type-arg]
    """Connect to Redis and fail startup if it does not answer a ping.

    Typing flags and send locks live only in Redis, so the app must not
    start serving chats without it.
    """
    global redis_client  # noqa: PLW0603
    config = settings.redis
    client = redis.from_url(
        config.url,
        decode_responses=True,
        socket_timeout=config.socket_timeout_seconds,
        socket_connect_timeout=config.socket_timeout_seconds,
    )
    try:
        await client.ping()
    except redis.RedisError:
        logger.exception("Redis ping failed", url=config.display_url)
        await client.aclose()
        raise
    redis_client = client
    logger.info("Redis connected", url=config.display_url)
    return client


async def close_redis() -> None:
    """Close the Redis connection."""
    global redis_client  # noqa: PLW0603
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")


def get_redis() -> redis.Redis:  # type: ignore[type-arg]
    """Return the client opened by ``init_redis``."""
    if redis_client is None:
        raise RuntimeError("Redis client not initialized")
    return redis_client
