"""NAV ingestion: the daily refresh cycle, the manual trigger and their scheduler."""

from .guard import IngestionGuard, ingestion_guard
from .ingestion_types import IngestionSummary, ManualRefreshResult, SchemeFailure
from .nav_ingestion_service import NavIngestionService
from .runner import build_ingestion_service, run_scheduled_refresh
from .scheduler import NavRefreshScheduler

__all__ = [
    "IngestionGuard",
    "IngestionSummary",
    "ManualRefreshResult",
    "NavIngestionService",
    "NavRefreshScheduler",
    "SchemeFailure",
    "build_ingestion_service",
    "ingestion_guard",
    "run_scheduled_refresh",
]
