"""In-process daily scheduler for the NAV refresh cycle.

Runs as a single asyncio task started from the application lifespan. The
cycle itself is synchronous (database session + HTTP client), so each run
is handed to a worker thread. A run that is already executing is never
cancelled: ``stop()`` waits for it to finish.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from navfolio.config import settings
from navfolio.services.exceptions import IngestionInProgressError

logger = logging.getLogger(__name__)


class NavRefreshScheduler:
    """Fires ``run_cycle`` once a day at a fixed local time."""

    def __init__(
        self,
        run_cycle: Callable[[], object],
        *,
        hour: int | None = None,
        minute: int | None = None,
        timezone: str | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._run_cycle = run_cycle
        self._hour = settings.nav_refresh_hour if hour is None else hour
        self._minute = settings.nav_refresh_minute if minute is None else minute
        self._tz = ZoneInfo(timezone or settings.nav_refresh_timezone)
        self._now = now or (lambda: datetime.now(UTC))
        self._task: asyncio.Task | None = None
        self._cycle: asyncio.Future | None = None
        self._next_run_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def cycle_in_progress(self) -> bool:
        return self._cycle is not None and not self._cycle.done()

    @property
    def next_run_at(self) -> datetime | None:
        return self._next_run_at if self.is_running else None

    def next_run_after(self, moment: datetime) -> datetime:
        """First scheduled time strictly after ``moment``, in the scheduler's timezone."""
        local = moment.astimezone(self._tz)
        candidate = local.replace(hour=self._hour, minute=self._minute, second=0, microsecond=0)
        if candidate <= local:
            candidate += timedelta(days=1)
        return candidate

    async def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop(), name="nav-refresh-scheduler")
        logger.info(
            "Daily NAV update scheduler started (runs at %02d:%02d %s)",
            self._hour,
            self._minute,
            self._tz.key,
        )

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            self._next_run_at = None

        if self.cycle_in_progress:
            logger.info("Waiting for in-flight NAV update to finish")
            try:
                await self._cycle
            except Exception:
                logger.exception("In-flight NAV update failed during shutdown")
        logger.info("Daily NAV update scheduler stopped")

    async def run_once(self) -> object | None:
        """Execute one cycle now, outside the daily timer.

        Returns the cycle result, or None when the cycle was skipped or failed.
        """
        self._cycle = asyncio.ensure_future(asyncio.to_thread(self._run_cycle))
        try:
            return await asyncio.shield(self._cycle)
        except IngestionInProgressError as e:
            logger.warning("Skipping scheduled NAV update: %s", e)
        except Exception:
            logger.exception("Daily NAV update failed")
        return None

    async def _loop(self) -> None:
        while True:
            now = self._now()
            self._next_run_at = self.next_run_after(now)
            delay = (self._next_run_at - now).total_seconds()
            logger.debug("Next NAV update at %s (in %.0fs)", self._next_run_at.isoformat(), delay)
            await asyncio.sleep(delay)
            await self.run_once()
