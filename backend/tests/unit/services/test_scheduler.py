"""Tests for NavRefreshScheduler."""

import asyncio
import threading
from datetime import UTC, datetime

from navfolio.services.exceptions import IngestionInProgressError
from navfolio.services.ingestion.scheduler import NavRefreshScheduler


def _scheduler(run_cycle=lambda: None, **kwargs) -> NavRefreshScheduler:
    kwargs.setdefault("hour", 0)
    kwargs.setdefault("minute", 0)
    kwargs.setdefault("timezone", "Asia/Kolkata")
    return NavRefreshScheduler(run_cycle, **kwargs)


class TestNextRun:
    def test_next_midnight_in_kolkata(self):
        # 17:00 UTC is 22:30 IST, so the next run is IST midnight = 18:30 UTC
        now = datetime(2026, 1, 15, 17, 0, tzinfo=UTC)

        next_run = _scheduler().next_run_after(now)

        assert next_run.astimezone(UTC) == datetime(2026, 1, 15, 18, 30, tzinfo=UTC)

    def test_exactly_at_run_time_schedules_next_day(self):
        now = datetime(2026, 1, 15, 18, 30, tzinfo=UTC)

        next_run = _scheduler().next_run_after(now)

        assert next_run.astimezone(UTC) == datetime(2026, 1, 16, 18, 30, tzinfo=UTC)

    def test_custom_time(self):
        now = datetime(2026, 1, 15, 0, 0, tzinfo=UTC)  # 05:30 IST

        next_run = _scheduler(hour=6, minute=15).next_run_after(now)

        assert (next_run.hour, next_run.minute) == (6, 15)
        assert next_run.date() == now.date()


class TestLifecycle:
    def test_start_and_stop(self):
        async def scenario():
            scheduler = _scheduler()
            await scheduler.start()
            await asyncio.sleep(0)
            running = scheduler.is_running
            next_run = scheduler.next_run_at
            await scheduler.stop()
            return running, next_run, scheduler.is_running

        running, next_run, after_stop = asyncio.run(scenario())

        assert running is True
        assert next_run is not None
        assert after_stop is False

    def test_fires_when_due(self):
        fired = threading.Event()

        # A clock stuck one second before midnight IST
        frozen = datetime(2026, 1, 15, 18, 29, 59, 900000, tzinfo=UTC)

        async def scenario():
            scheduler = _scheduler(fired.set, now=lambda: frozen)
            await scheduler.start()
            for _ in range(50):
                if fired.is_set():
                    break
                await asyncio.sleep(0.05)
            await scheduler.stop()

        asyncio.run(scenario())

        assert fired.is_set()

    def test_stop_waits_for_in_flight_cycle(self):
        started = threading.Event()
        release = threading.Event()
        finished = []

        def slow_cycle():
            started.set()
            release.wait(timeout=5)
            finished.append(True)

        async def scenario():
            scheduler = _scheduler(slow_cycle)
            task = asyncio.create_task(scheduler.run_once())
            while not started.is_set():
                await asyncio.sleep(0.01)
            task.cancel()
            release.set()
            await scheduler.stop()
            return scheduler.cycle_in_progress

        in_progress = asyncio.run(scenario())

        assert finished == [True]
        assert in_progress is False


class TestRunOnce:
    def test_returns_cycle_result(self):
        assert asyncio.run(_scheduler(lambda: "summary").run_once()) == "summary"

    def test_overlap_is_skipped(self):
        def busy():
            raise IngestionInProgressError("manual")

        assert asyncio.run(_scheduler(busy).run_once()) is None

    def test_failure_is_logged_not_raised(self, caplog):
        def broken():
            raise RuntimeError("database down")

        assert asyncio.run(_scheduler(broken).run_once()) is None
        assert "Daily NAV update failed" in caplog.text
