"""
Redis client lifecycle for the Redis conversation store.

One pooled redis.asyncio client per process, owned by the DI container
(RedisStoreProvider): created and pinged on first use, closed with the
container. Responses are decoded to str since records are stored as JSON text.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from kvision_messaging.config.settings import Config

logger = logging.getLogger(__name__)


async def create_redis_client(
    url: Optional[str] = None, timeout: Optional[float] = None
) -> Redis:
    """
    Create and ping a pooled async client.

    Raises:
        redis.ConnectionError: Redis is not reachable at startup
    """
    url = url or Config.REDIS_URL
    timeout = timeout or Config.REDIS_SOCKET_TIMEOUT_SECONDS
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )

    await client.ping()
    logger.info("[Redis] Connected, conversations in hash %s", Config.REDIS_CONVERSATIONS_KEY)

    return client


async def close_redis_client(client: Optional[Redis]) -> None:
    if client is None:
        return
    await client.aclose()
    logger.info("[Redis] Connection closed")
