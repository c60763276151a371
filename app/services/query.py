"""Query service - read paths used by the serving layer."""

import json
from typing import Any

from loguru import logger

from app.errors import StoreError
from app.repositories import CacheRepository
from app.services.metrics import CacheMetrics


class QueryService:
    """Single and batch reads of normalized source payloads.

    Reads only ever touch the cache. Store failures count as errors and
    come back as misses; they are never raised to the caller.
    """

    def __init__(self, cache: CacheRepository, metrics: CacheMetrics):
        self._cache = cache
        self._metrics = metrics

    async def get_one(self, source: str) -> Any | None:
        try:
            cached = await self._cache.get(self._cache.keys.data(source))
        except StoreError as e:
            self._metrics.record("errors")
            logger.warning("Failed to get cached data for service {}: {}", source, e.cause)
            return None

        if cached is None:
            self._metrics.record("misses")
            return None

        try:
            payload = json.loads(cached)
        except ValueError as e:
            self._metrics.record("errors")
            logger.warning("Failed to parse cached data for service {}: {}", source, e)
            return None

        self._metrics.record("hits")
        return payload

    async def get_many(self, sources: list[str]) -> dict[str, Any]:
        """One batched read; unparseable entries are dropped from the result."""
        if not sources:
            return {}

        keys = {self._cache.keys.data(s): s for s in sources}
        try:
            cached = await self._cache.get_many(list(keys))
        except StoreError as e:
            self._metrics.record("errors")
            logger.warning("Failed to get multiple cached services: {}", e.cause)
            return {}

        result: dict[str, Any] = {}
        for key, source in keys.items():
            if key not in cached:
                self._metrics.record("misses")
                continue
            try:
                result[source] = json.loads(cached[key])
            except ValueError as e:
                self._metrics.record("errors")
                logger.warning("Failed to parse cached data for service {}: {}", source, e)
                continue
            self._metrics.record("hits")
        return result

    def get_metrics(self) -> dict[str, int]:
        return self._metrics.snapshot()

    def reset_metrics(self) -> None:
        self._metrics.reset()
        logger.info("Cache metrics reset")
