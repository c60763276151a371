"""Services package - service class exports."""

from app.services.lookup import BadgeLookup
from app.services.metrics import CacheMetrics
from app.services.query import QueryService
from app.services.refresh import RefreshOrchestrator
from app.services.scheduler import RefreshScheduler

__all__ = [
    "BadgeLookup",
    "CacheMetrics",
    "QueryService",
    "RefreshOrchestrator",
    "RefreshScheduler",
]
