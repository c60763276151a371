"""Distributed lock over the shared store."""

import os
import socket
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as redis
from loguru import logger

from app.errors import StoreError
from app.models import CacheKeys
from app.repositories.base import BaseRepository

DEFAULT_LOCK_TTL = 300


class LockRepository(BaseRepository):
    """Set-if-absent lock with a bounded lifetime.

    The TTL bounds how long a crashed holder can wedge a source. Release is
    an unconditional delete, so a holder that outlives its TTL may release
    a lock someone else has since acquired.
    """

    def __init__(self, client: redis.Redis, ttl: int = DEFAULT_LOCK_TTL):
        super().__init__(client)
        self._ttl = ttl
        self._holder = f"{socket.gethostname()}:{os.getpid()}"

    async def acquire(self, name: str) -> bool:
        """Take the lock for ``name``; False when held elsewhere.

        A store failure raises :class:`StoreError` rather than reading as
        contention.
        """
        token = f"{self._holder}:{int(time.time() * 1000)}"
        acquired = await self._call("acquire", self._redis.set(CacheKeys.lock(name), token, ex=self._ttl, nx=True))
        return bool(acquired)

    async def release(self, name: str) -> None:
        try:
            await self._call("release", self._redis.delete(CacheKeys.lock(name)))
        except StoreError as e:
            logger.error("Failed to release lock for {}: {}", name, e.cause)

    @asynccontextmanager
    async def hold(self, name: str) -> AsyncIterator[bool]:
        """Yield whether the lock was acquired; release on exit only if it was."""
        acquired = await self.acquire(name)
        try:
            yield acquired
        finally:
            if acquired:
                await self.release(name)
