"""Dependency container - constructed once by the process entry point."""

from functools import partial
from pathlib import Path

import redis.asyncio as redis
from loguru import logger

import settings
from app.models import CacheKeys
from app.repositories import CacheRepository, LockRepository, connect, ping
from app.services import BadgeLookup, CacheMetrics, QueryService, RefreshOrchestrator, RefreshScheduler
from app.services.normalizers import build_registry
from app.sources import SOURCES
from badge_client import BaseClient, RepoSyncer


class Container:
    """Owns the redis client and every service built on it.

    Tests pass their own ``client`` (and overrides) instead of a URL.
    """

    def __init__(
        self,
        redis_url: str = settings.REDIS_URL,
        client: redis.Redis | None = None,
        sources=SOURCES,
        client_factory=None,
        syncer: RepoSyncer | None = None,
        cache_dir: Path = settings.CACHE_DIR,
        refresh_interval_ms: int = settings.REFRESH_INTERVAL_MS,
        cache_ttl: int = settings.CACHE_TTL_SECONDS,
        preload_on_startup: bool = settings.PRELOAD_ON_STARTUP,
    ):
        self.redis = client or connect(redis_url, settings.REDIS_TIMEOUT_MS)
        self.keys = CacheKeys(settings.CACHE_VERSION)
        self.registry = build_registry()
        self.metrics = CacheMetrics()

        client_factory = client_factory or partial(
            BaseClient,
            timeout=settings.HTTP_TIMEOUT_MS / 1000,
            max_retries=settings.HTTP_MAX_RETRIES,
            user_agent=settings.USER_AGENT,
        )

        # Repositories
        self.cache = CacheRepository(self.redis, self.keys)
        self.lock = LockRepository(self.redis, ttl=settings.GIT_LOCK_TTL)

        # Services
        self.orchestrator = RefreshOrchestrator(
            cache=self.cache,
            lock=self.lock,
            sources=sources,
            registry=self.registry,
            client_factory=client_factory,
            syncer=syncer or RepoSyncer(timeout=settings.GIT_TIMEOUT),
            cache_dir=cache_dir,
            refresh_interval_ms=refresh_interval_ms,
            cache_ttl=cache_ttl,
            github_token=settings.GITHUB_TOKEN,
        )
        self.scheduler = RefreshScheduler(
            self.orchestrator,
            interval=refresh_interval_ms / 1000,
            preload_on_startup=preload_on_startup,
        )
        self.query = QueryService(self.cache, self.metrics)
        self.lookup = BadgeLookup(
            query=self.query,
            cache=self.cache,
            sources=sources,
            registry=self.registry,
            client_factory=client_factory,
            user_cache_ttl=min(cache_ttl, settings.USER_CACHE_TTL),
            discord_token=settings.DISCORD_TOKEN,
        )

    async def init(self) -> None:
        """Verify the store is reachable; raises StoreError otherwise."""
        logger.info("Initializing badge cache manager...")
        await ping(self.redis, settings.REDIS_TIMEOUT_MS)

    async def start(self) -> None:
        await self.init()
        await self.scheduler.start()

    async def shutdown(self) -> None:
        await self.scheduler.stop()
        await self.redis.aclose()
        logger.info("Badge cache manager shut down")
