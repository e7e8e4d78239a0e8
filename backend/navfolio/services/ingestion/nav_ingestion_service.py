"""Refreshes latest NAVs and NAV history for every held scheme.

One run:
1. Read the distinct held scheme codes (failure aborts the run)
2. Walk them in ascending order, fetching and storing one scheme at a time
3. Pause between batches (scheduled) or between items (manual) to stay
   within the NAV source's rate limits
4. Report success/failure counts and row totals

A scheme whose fetch or store fails is recorded and skipped; its latest
NAV row is left as it was.
"""

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime

from navfolio.config import settings
from navfolio.constants import IngestionTrigger
from navfolio.services.ingestion.guard import IngestionGuard, ingestion_guard
from navfolio.services.ingestion.ingestion_types import (
    IngestionSummary,
    ManualRefreshResult,
    SchemeFailure,
)
from navfolio.services.market_data.mfapi_client import MfApiClient, NavFetchFailure, NavQuote
from navfolio.services.repositories.protocols import HolderSchemeSource, NavStore

logger = logging.getLogger(__name__)


class NavIngestionService:
    """Sequential, paced NAV refresh over the held scheme set."""

    def __init__(
        self,
        nav_store: NavStore,
        holder_schemes: HolderSchemeSource,
        client: MfApiClient,
        *,
        guard: IngestionGuard | None = None,
        sleep: Callable[[float], None] = time.sleep,
        batch_size: int | None = None,
        batch_pause_seconds: float | None = None,
        manual_limit: int | None = None,
        manual_item_delay_seconds: float | None = None,
    ) -> None:
        self._store = nav_store
        self._holder_schemes = holder_schemes
        self._client = client
        self._guard = guard or ingestion_guard
        self._sleep = sleep
        self._batch_size = max(1, batch_size or settings.nav_refresh_batch_size)
        self._batch_pause = (
            batch_pause_seconds
            if batch_pause_seconds is not None
            else settings.nav_refresh_batch_pause_seconds
        )
        self._manual_limit = manual_limit or settings.nav_manual_refresh_limit
        self._manual_item_delay = (
            manual_item_delay_seconds
            if manual_item_delay_seconds is not None
            else settings.nav_manual_refresh_item_delay_seconds
        )

    def run_cycle(self, trigger: str = IngestionTrigger.SCHEDULED) -> IngestionSummary:
        """Refresh every held scheme.

        Raises:
            IngestionInProgressError: If another run is in flight
            SchemeListError: If the held scheme list cannot be read
        """
        with self._guard.hold(trigger):
            summary = self._run(trigger)
        self._guard.record(summary)
        return summary

    def run_manual(self, limit: int | None = None) -> ManualRefreshResult:
        """Refresh the first ``limit`` held schemes with a short per-item delay.

        Raises:
            IngestionInProgressError: If another run is in flight
            SchemeListError: If the held scheme list cannot be read
        """
        limit = limit or self._manual_limit
        logger.info("Running manual NAV update (limit=%d)", limit)

        with self._guard.hold(IngestionTrigger.MANUAL):
            summary = self._run(
                IngestionTrigger.MANUAL,
                limit=limit,
                item_delay=self._manual_item_delay,
            )
        self._guard.record(summary)

        if summary.schemes_found == 0:
            return ManualRefreshResult(
                success=False, message="No schemes to update", processed=0, summary=summary
            )
        return ManualRefreshResult(
            success=True,
            message=f"Manual update completed: {summary.message}",
            processed=summary.processed,
            summary=summary,
        )

    def refresh_scheme(self, scheme_code: int) -> NavQuote:
        """Fetch and store the latest NAV for one scheme.

        Raises:
            UpstreamFetchError: If the NAV source cannot provide a NAV
        """
        result = self._client.fetch_latest(scheme_code)
        if isinstance(result, NavFetchFailure):
            raise result.to_error()
        self._store_quote(result)
        logger.info("Updated NAV for scheme %s: %s (%s)", scheme_code, result.nav, result.nav_date)
        return result

    def _run(
        self,
        trigger: str,
        limit: int | None = None,
        item_delay: float | None = None,
    ) -> IngestionSummary:
        summary = IngestionSummary(trigger=trigger, started_at=datetime.now(UTC))

        scheme_codes = self._holder_schemes.find_holder_scheme_ids()
        summary.schemes_found = len(scheme_codes)

        if not scheme_codes:
            logger.info("No schemes found in portfolios. Skipping NAV update.")
            return self._finish(summary)

        to_process = scheme_codes[:limit] if limit else scheme_codes
        logger.info(
            "Starting %s NAV update: %d held schemes, processing %d",
            trigger,
            len(scheme_codes),
            len(to_process),
        )

        for index, scheme_code in enumerate(to_process):
            if index > 0:
                self._pace(index, item_delay)

            failure = self._process_scheme(scheme_code, summary)
            summary.processed += 1
            if failure is None:
                summary.succeeded += 1
            else:
                summary.failed += 1
                summary.failures.append(failure)

        return self._finish(summary)

    def _pace(self, index: int, item_delay: float | None) -> None:
        if item_delay is not None:
            if item_delay > 0:
                self._sleep(item_delay)
            return

        if index % self._batch_size == 0 and self._batch_pause > 0:
            logger.info("Processed %d schemes, waiting %.1f seconds...", index, self._batch_pause)
            self._sleep(self._batch_pause)

    def _process_scheme(self, scheme_code: int, summary: IngestionSummary) -> SchemeFailure | None:
        try:
            result = self._client.fetch_latest(scheme_code)
        except Exception as e:
            logger.exception("Unexpected error fetching NAV for scheme %s", scheme_code)
            return SchemeFailure(scheme_code, f"Fetch failed: {type(e).__name__}")

        if isinstance(result, NavFetchFailure):
            logger.warning("Failed to fetch NAV for scheme %s: %s", scheme_code, result.reason)
            return SchemeFailure(scheme_code, result.reason)

        try:
            if self._store_quote(result):
                summary.history_inserted += 1
        except Exception:
            logger.exception("Failed to store NAV for scheme %s", scheme_code)
            return SchemeFailure(scheme_code, "Store failed")

        logger.info("Updated NAV for scheme %s: %s (%s)", scheme_code, result.nav, result.nav_date)
        return None

    def _store_quote(self, quote: NavQuote) -> bool:
        """Write latest + history for one quote as a single unit.

        Returns:
            True if a new history row was added
        """
        try:
            self._store.upsert_latest(quote.scheme_code, quote.nav, quote.nav_date)
            inserted = self._store.upsert_history_if_absent(
                quote.scheme_code, quote.nav, quote.nav_date
            )
            self._store.commit()
        except Exception:
            self._store.rollback()
            raise
        return inserted

    def _finish(self, summary: IngestionSummary) -> IngestionSummary:
        summary.latest_nav_rows = self._store.count_latest()
        summary.history_rows = self._store.count_history()
        summary.finished_at = datetime.now(UTC)

        logger.info("NAV update completed (%s): %s", summary.trigger, summary.message)
        logger.info(
            "Database stats - Latest NAV: %d, History: %d",
            summary.latest_nav_rows,
            summary.history_rows,
        )
        return summary
