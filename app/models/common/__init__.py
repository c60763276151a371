"""Common models - base classes and shared key layout."""

from app.models.common.base import BaseEntity
from app.models.common.keys import CacheKeys

__all__ = [
    "BaseEntity",
    "CacheKeys",
]
