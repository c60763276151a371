"""Per-user badge lookup across sources."""

import asyncio
import json
from collections.abc import Callable
from typing import Any

from loguru import logger

from app.errors import StoreError, UnknownSourceError
from app.models import Badge, SourceDescriptor
from app.repositories import CacheRepository
from app.services.normalizers import Normalizer, normalize, serialize
from app.services.query import QueryService
from app.sources import find_source
from badge_client import BaseClient, FetchError

BadgeDicts = list[dict[str, Any]]


def _is_badge(item: Any) -> bool:
    return isinstance(item, dict) and isinstance(item.get("tooltip"), str) and isinstance(item.get("badge"), str)


def _render(item: dict[str, Any], origin: str) -> dict[str, Any]:
    return Badge.from_dict(item).with_origin(origin).to_dict()


class BadgeLookup:
    """Resolves a user's badges from the cached sources plus live-only sources.

    Cached sources are read in one batch through the query service. Live
    sources are fetched per request and kept in a short per-user cache.
    """

    def __init__(
        self,
        query: QueryService,
        cache: CacheRepository,
        sources: tuple[SourceDescriptor, ...],
        registry: dict[str, Normalizer],
        client_factory: Callable[[], BaseClient],
        user_cache_ttl: int,
        discord_token: str | None = None,
    ):
        self._query = query
        self._cache = cache
        self._sources = sources
        self._registry = registry
        self._client_factory = client_factory
        self._user_cache_ttl = user_cache_ttl
        self._discord_token = discord_token

    def resolve(self, names: list[str] | None) -> list[SourceDescriptor]:
        if not names:
            return list(self._sources)
        resolved = []
        for name in names:
            source = find_source(name, self._sources)
            if source is None:
                raise UnknownSourceError(name)
            resolved.append(source)
        return resolved

    async def for_user(
        self,
        user_id: str,
        services: list[str] | None = None,
        nocache: bool = False,
        separated: bool = False,
        origin: str = "",
    ) -> BadgeDicts | dict[str, BadgeDicts]:
        """Badges for ``user_id``: a flat list, or per-source lists when ``separated``."""
        targets = self.resolve(services)
        results: dict[str, BadgeDicts] = {}

        cached = [s.name for s in targets if s.cached]
        payloads = await self._query.get_many(cached)
        for name in cached:
            if name not in payloads:
                logger.warning("No cached data for service: {}", name)
                continue
            results[name] = payloads[name].get(user_id, []) if isinstance(payloads[name], dict) else []

        live = [s for s in targets if not s.cached]
        if live:
            async with self._client_factory() as client:
                found = await asyncio.gather(*(self._live(s, user_id, nocache, client) for s in live))
            results.update({s.name: badges for s, badges in zip(live, found, strict=True)})

        ordered = {
            s.name: [_render(b, origin if s.local_icons else "") for b in results[s.name] if _is_badge(b)]
            for s in targets
            if s.name in results
        }
        if separated:
            return ordered
        return [badge for badges in ordered.values() for badge in badges]

    async def _live(self, source: SourceDescriptor, user_id: str, nocache: bool, client: BaseClient) -> BadgeDicts:
        key = self._cache.keys.user(source.name, user_id)
        if not nocache:
            try:
                hit = await self._cache.get(key)
                if hit is not None:
                    return json.loads(hit)
            except (StoreError, ValueError) as e:
                logger.warning("Failed to get user badge cache for {}:{}: {}", source.name, user_id, e)

        headers = None
        if source.auth_scheme:
            if not self._discord_token:
                logger.warning("{}: bot token not configured", source.name)
                return []
            headers = {"Authorization": f"{source.auth_scheme} {self._discord_token}"}

        try:
            data = await client.fetch(source.user_url(user_id), headers=headers, max_retries=0)
        except FetchError as e:
            logger.warning("{}: lookup failed for {}: {}", source.name, user_id, e)
            return []

        raw = {"data": data, "user_id": user_id}
        badges = serialize(normalize(self._registry, source, raw)).get(user_id, [])

        if badges and not nocache:
            try:
                await self._cache.set(key, json.dumps(badges), self._user_cache_ttl)
            except StoreError as e:
                logger.warning("Failed to cache user badges for {}:{}: {}", source.name, user_id, e.cause)
        return badges
