"""Repositories package - data access layer for the shared store."""

from app.repositories.base import BaseRepository
from app.repositories.common import DEFAULT_LOCK_TTL, CacheRepository, LockRepository
from app.repositories.db import connect, ping

__all__ = [
    # DB
    "connect",
    "ping",
    # Base
    "BaseRepository",
    # Common
    "CacheRepository",
    "LockRepository",
    "DEFAULT_LOCK_TTL",
]
