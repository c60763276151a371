"""Base repository class."""

from collections.abc import Awaitable
from typing import Any

import redis.asyncio as redis
from loguru import logger
from redis.exceptions import RedisError

from app.errors import StoreError


class BaseRepository:
    """Base repository over the shared redis client."""

    def __init__(self, client: redis.Redis):
        self._redis = client
        logger.debug("{} initialized", self.__class__.__name__)

    async def _call(self, operation: str, awaitable: Awaitable[Any]) -> Any:
        """Await a store command, mapping client failures to :class:`StoreError`."""
        try:
            return await awaitable
        except (RedisError, OSError) as e:
            raise StoreError(operation, e) from e
