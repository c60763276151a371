"""Shared cache key layout.

Payload and timestamp keys carry the cache version so bumping
``CACHE_VERSION`` invalidates every entry at once. Lock and per-user keys
are unversioned.
"""

from dataclasses import dataclass

DATA_PREFIX = "badge_service_data"
TIMESTAMP_PREFIX = "badge_cache_timestamp"
LOCK_PREFIX = "git_lock"
USER_PREFIX = "user_badges"


@dataclass(frozen=True)
class CacheKeys:
    """Builds store keys for one cache version."""

    version: str = "v1"

    def data(self, source: str) -> str:
        return f"{DATA_PREFIX}:{self.version}:{source}"

    def timestamp(self, source: str) -> str:
        return f"{TIMESTAMP_PREFIX}:{self.version}:{source}"

    def pair(self, source: str) -> tuple[str, str]:
        """Payload and timestamp keys, always written and deleted together."""
        return self.data(source), self.timestamp(source)

    @staticmethod
    def lock(source: str) -> str:
        return f"{LOCK_PREFIX}:{source}"

    @staticmethod
    def user(source: str, user_id: str) -> str:
        return f"{USER_PREFIX}:{source}:{user_id}"
