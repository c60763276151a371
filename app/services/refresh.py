"""Refresh orchestration - fetch, normalize and store every source."""

import asyncio
import json
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from app.errors import StoreError, UnknownSourceError
from app.models import RefreshOutcome, RefreshReport, SourceDescriptor, SourceKind, UserBadges
from app.repositories import CacheRepository, LockRepository
from app.services.normalizers import Normalizer, normalize, serialize
from app.sources import find_source
from badge_client import BaseClient, RepoSyncer, TerminalFetchError, has_working_tree, read_json_dir


class RefreshOrchestrator:
    """Runs one fetch -> normalize -> store pipeline per source.

    Per-source failures stay inside that source's task. File-tree sources
    sync under the distributed lock and are skipped, not awaited, when
    another process holds it.
    """

    def __init__(
        self,
        cache: CacheRepository,
        lock: LockRepository,
        sources: tuple[SourceDescriptor, ...],
        registry: dict[str, Normalizer],
        client_factory: Callable[[], BaseClient],
        syncer: RepoSyncer,
        cache_dir: Path,
        refresh_interval_ms: int,
        cache_ttl: int,
        github_token: str | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._cache = cache
        self._lock = lock
        self._sources = sources
        self._registry = registry
        self._client_factory = client_factory
        self._syncer = syncer
        self._cache_dir = cache_dir
        self._refresh_interval_ms = refresh_interval_ms
        self._cache_ttl = cache_ttl
        self._github_token = github_token
        self._clock = clock
        logger.debug("RefreshOrchestrator initialized with {} sources", len(sources))

    @property
    def cached_sources(self) -> list[SourceDescriptor]:
        return [s for s in self._sources if s.cached]

    def tree_path(self, source: SourceDescriptor) -> Path:
        return self._cache_dir / source.name

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # ========== Validity ==========

    async def needs_refresh(self) -> bool:
        """True when any cached source is missing, expired or lacks its working tree."""
        now = self._now_ms()
        try:
            for source in self.cached_sources:
                data_key, ts_key = self._cache.keys.pair(source.name)
                values = await self._cache.get_many([data_key, ts_key])

                if data_key not in values or ts_key not in values:
                    logger.debug("Cache missing for service: {}", source.name)
                    return True

                if now - int(values[ts_key]) >= self._refresh_interval_ms:
                    logger.debug("Cache expired for service: {}", source.name)
                    return True

                if source.requires_lock and not has_working_tree(self.tree_path(source)):
                    logger.debug("Working tree missing for service: {}, forcing update", source.name)
                    return True
        except (StoreError, ValueError) as e:
            logger.warning("Failed to check cache validity, forcing update: {}", e)
            return True

        logger.debug("All service caches are valid")
        return False

    # ========== Refresh ==========

    async def refresh_all(self) -> dict[str, RefreshOutcome | None]:
        """Refresh every cached source concurrently; ``None`` marks a failed source."""
        sources = self.cached_sources
        logger.info("Updating badge service data ({} sources)...", len(sources))

        async with self._client_factory() as client:
            results = await asyncio.gather(*(self._refresh_isolated(s, client) for s in sources))

        outcomes = {s.name: r for s, r in zip(sources, results, strict=True)}
        failed = [name for name, r in outcomes.items() if r is None]
        updated = sum(1 for r in outcomes.values() if r == RefreshOutcome.UPDATED)
        logger.info("Badge service data update completed: {} updated, {} failed {}", updated, len(failed), failed)
        return outcomes

    async def _refresh_isolated(self, source: SourceDescriptor, client: BaseClient) -> RefreshOutcome | None:
        try:
            return await self.refresh_source(source, client)
        except Exception as e:
            logger.error("Failed to update service data for {}: {}", source.name, e)
            return None

    async def refresh_source(self, source: SourceDescriptor, client: BaseClient) -> RefreshOutcome:
        """Refresh one source; fetch and sync errors propagate."""
        if not source.cached:
            return RefreshOutcome.NOT_CACHED

        if source.requires_lock:
            async with self._lock.hold(source.name) as acquired:
                if not acquired:
                    logger.warning("{}: git operation already in progress, skipping", source.name)
                    return RefreshOutcome.LOCKED
                raw = await self._load_tree(source)
        else:
            raw = await self._load_http(source, client)

        if raw is None:
            logger.warning("{}: no data fetched, keeping previous cache entry", source.name)
            return RefreshOutcome.NO_DATA

        badges = normalize(self._registry, source, raw)
        return await self._store(source, badges)

    async def _load_http(self, source: SourceDescriptor, client: BaseClient) -> dict[str, Any] | None:
        """Fetch the badge payload (and plugin manifest); a rejected part stays empty."""
        parts = {"data": source.url}
        if source.kind == SourceKind.HTTP_JSON_MANIFEST and source.manifest_url:
            parts["plugins"] = source.manifest_url

        raw: dict[str, Any] = {}
        for part, url in parts.items():
            try:
                raw[part] = await client.fetch(url)
            except TerminalFetchError as e:
                logger.warning("{}: {} request rejected: {}", source.name, part, e)
        return raw or None

    async def _load_tree(self, source: SourceDescriptor) -> dict[str, Any]:
        """Sync the working tree, then read user files and badge definitions."""
        path = self.tree_path(source)
        await self._syncer.sync(path, source.repo_url or "", self._github_token, name=source.name)

        users = await asyncio.to_thread(read_json_dir, path / source.users_dir)
        badges = await asyncio.to_thread(read_json_dir, path / source.badges_dir) if source.badges_dir else {}
        logger.debug("{}: found {} user files and {} badge definitions", source.name, len(users), len(badges))
        return {"users": users, "badges": badges}

    async def _store(self, source: SourceDescriptor, badges: UserBadges) -> RefreshOutcome:
        """Write payload and timestamp together with the same TTL."""
        data_key, ts_key = self._cache.keys.pair(source.name)
        payload = json.dumps(serialize(badges))
        try:
            await self._cache.set_many({data_key: payload, ts_key: str(self._now_ms())}, self._cache_ttl)
        except StoreError as e:
            logger.error("Failed to store cache for service {}: {}", source.name, e.cause)
            return RefreshOutcome.STORE_FAILED

        logger.debug("Updated cache for service: {} ({} users)", source.name, len(badges))
        return RefreshOutcome.UPDATED

    # ========== Admin ==========

    def _resolve(self, name: str | None) -> list[SourceDescriptor]:
        if name is None or name.lower() == "all":
            return list(self._sources)
        source = find_source(name, self._sources)
        if source is None:
            raise UnknownSourceError(name)
        return [source]

    async def force_refresh(self, name: str) -> dict[str, RefreshReport]:
        """Refresh one source (or ``all``, sequentially), bypassing the validity check."""
        targets = self._resolve(name)
        report: dict[str, RefreshReport] = {}

        async with self._client_factory() as client:
            for source in targets:
                try:
                    outcome = await self.refresh_source(source, client)
                except Exception as e:
                    logger.warning("Force update failed for {}: {}", source.name, e)
                    report[source.name] = RefreshReport(success=False, error=str(e))
                    continue

                if outcome == RefreshOutcome.STORE_FAILED:
                    report[source.name] = RefreshReport(success=False, outcome=outcome, error="cache write failed")
                else:
                    report[source.name] = RefreshReport(success=True, outcome=outcome)
                logger.info("Force updated service: {} ({})", source.name, outcome)

        return report

    async def clear(self, name: str | None = None) -> int:
        """Delete payload and timestamp keys; returns the number of keys removed."""
        targets = [s for s in self._resolve(name) if s.cached]
        keys = [key for s in targets for key in self._cache.keys.pair(s.name)]
        deleted = await self._cache.delete(*keys)
        logger.info("Cleared cache for {} ({} keys)", name or "all services", deleted)
        return deleted
