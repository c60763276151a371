"""Shared-store repositories."""

from app.repositories.common.cache import CacheRepository
from app.repositories.common.lock import DEFAULT_LOCK_TTL, LockRepository

__all__ = ["CacheRepository", "LockRepository", "DEFAULT_LOCK_TTL"]
