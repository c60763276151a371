"""Models package - entities and descriptors."""

from app.models.badge import Badge, UserBadges
from app.models.common import BaseEntity, CacheKeys
from app.models.refresh import RefreshOutcome, RefreshReport, SchedulerState
from app.models.source import SourceDescriptor, SourceKind

__all__ = [
    # Common
    "BaseEntity",
    "CacheKeys",
    # Badges
    "Badge",
    "UserBadges",
    # Sources
    "SourceKind",
    "SourceDescriptor",
    # Refresh
    "RefreshOutcome",
    "RefreshReport",
    "SchedulerState",
]
