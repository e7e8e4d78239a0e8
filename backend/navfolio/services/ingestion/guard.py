"""Process-wide mutual exclusion for NAV ingestion runs.

The scheduled cycle, the full-cycle endpoint and the manual trigger all
acquire the same guard, so two runs never process the scheme set at once.
Acquisition never blocks: a second caller is rejected.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from navfolio.services.exceptions import IngestionInProgressError

if TYPE_CHECKING:
    from navfolio.services.ingestion.ingestion_types import IngestionSummary

logger = logging.getLogger(__name__)


class IngestionGuard:
    """Non-blocking lock that remembers who holds it and the last finished run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holder: str | None = None
        self._acquired_at: datetime | None = None
        self._last_summary: "IngestionSummary | None" = None

    @property
    def last_summary(self) -> "IngestionSummary | None":
        """Summary of the most recently completed run."""
        return self._last_summary

    def record(self, summary: "IngestionSummary") -> None:
        self._last_summary = summary

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    @property
    def holder(self) -> str | None:
        return self._holder

    @property
    def acquired_at(self) -> datetime | None:
        return self._acquired_at

    @contextmanager
    def hold(self, trigger: str) -> Iterator[None]:
        """Hold the guard for the duration of a run.

        Raises:
            IngestionInProgressError: If another run holds the guard
        """
        if not self._lock.acquire(blocking=False):
            logger.warning(
                "Rejected %s NAV ingestion: %s run in progress since %s",
                trigger,
                self._holder,
                self._acquired_at,
            )
            raise IngestionInProgressError(self._holder)

        self._holder = trigger
        self._acquired_at = datetime.now(UTC)
        try:
            yield
        finally:
            self._holder = None
            self._acquired_at = None
            self._lock.release()


# Shared by every ingestion entry point in this process
ingestion_guard = IngestionGuard()
