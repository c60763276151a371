"""Cache repository - versioned badge payloads in the shared store."""

import redis.asyncio as redis
from loguru import logger

from app.models import CacheKeys
from app.repositories.base import BaseRepository


class CacheRepository(BaseRepository):
    """get / multi-get / set / delete against the shared store.

    Every method raises :class:`StoreError` on store failure; callers
    decide whether that is a miss, a skipped write or fatal.
    """

    def __init__(self, client: redis.Redis, keys: CacheKeys):
        super().__init__(client)
        self.keys = keys

    async def get(self, key: str) -> str | None:
        return await self._call("get", self._redis.get(key))

    async def get_many(self, keys: list[str]) -> dict[str, str]:
        """Partial map: missing keys are simply absent."""
        if not keys:
            return {}
        values = await self._call("mget", self._redis.mget(keys))
        return {key: value for key, value in zip(keys, values, strict=True) if value is not None}

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._call("set", self._redis.set(key, value, ex=ttl))

    async def set_many(self, items: dict[str, str], ttl: int) -> None:
        """Write all items in one MULTI/EXEC so they land and expire together."""
        async with self._redis.pipeline(transaction=True) as pipe:
            for key, value in items.items():
                pipe.set(key, value, ex=ttl)
            await self._call("set_many", pipe.execute())

    async def delete(self, *keys: str) -> int:
        """Delete keys, returning how many existed."""
        if not keys:
            return 0
        deleted = await self._call("delete", self._redis.delete(*keys))
        logger.debug("Deleted {} of {} keys", deleted, len(keys))
        return int(deleted)
