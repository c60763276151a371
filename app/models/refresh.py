"""Refresh results."""

from dataclasses import dataclass
from enum import StrEnum

from app.models.common import BaseEntity


class RefreshOutcome(StrEnum):
    """Result of one per-source refresh."""

    UPDATED = "updated"
    NO_DATA = "no_data"
    LOCKED = "locked"
    NOT_CACHED = "not_cached"
    STORE_FAILED = "store_failed"


class SchedulerState(StrEnum):
    """Refresh scheduler states."""

    IDLE = "idle"
    CHECKING = "checking"
    REFRESHING = "refreshing"


@dataclass(frozen=True)
class RefreshReport(BaseEntity):
    """Per-source entry of a forced refresh report."""

    success: bool
    outcome: str | None = None
    error: str | None = None
