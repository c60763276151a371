"""Redis connection management."""

import asyncio

import redis.asyncio as redis
from loguru import logger
from redis.exceptions import RedisError

from app.errors import StoreError


def connect(url: str, timeout_ms: int = 5000) -> redis.Redis:
    """Create a client; the connection itself is opened lazily."""
    timeout = timeout_ms / 1000
    client = redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    logger.debug("Redis client created (timeout={}s)", timeout)
    return client


async def ping(client: redis.Redis, timeout_ms: int = 5000) -> None:
    """Fail fast when the store is unreachable; nothing can be served without it."""
    try:
        await asyncio.wait_for(client.ping(), timeout_ms / 1000)
    except TimeoutError:
        raise StoreError("ping", f"Redis connection timeout after {timeout_ms}ms") from None
    except (RedisError, OSError) as e:
        raise StoreError("ping", e) from e
    logger.info("Redis connection established")
