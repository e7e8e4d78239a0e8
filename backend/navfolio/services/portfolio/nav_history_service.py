"""NAV history reads with on-demand backfill from the NAV source.

When a scheme has no stored history, the newest observations are fetched,
inserted (existing dates are left alone) and the latest NAV is refreshed from
the newest entry. A failed fetch never fails the caller: it gets whatever is
stored, possibly nothing.
"""

import logging

from sqlalchemy.orm import Session

from navfolio.config import settings
from navfolio.models import LatestNav, NavHistory
from navfolio.services.market_data.mfapi_client import MfApiClient, NavFetchFailure
from navfolio.services.repositories.nav_repository import NavRepository

logger = logging.getLogger(__name__)


class NavHistoryService:
    """Reads NAV history for a scheme, backfilling it when empty."""

    def __init__(
        self,
        db: Session,
        client: MfApiClient | None = None,
        limit: int | None = None,
    ) -> None:
        self._navs = NavRepository(db)
        self._client = client
        self._limit = limit or settings.nav_history_limit

    def get_history(self, scheme_code: int) -> list[NavHistory]:
        """Newest stored history rows for a scheme, backfilling when none exist."""
        history = self._navs.find_history(scheme_code, self._limit)
        if history or self._client is None:
            return history

        logger.info("Fetching NAV history for scheme %s from external API...", scheme_code)
        self.backfill(scheme_code)
        return self._navs.find_history(scheme_code, self._limit)

    def get_latest(self, scheme_code: int) -> LatestNav | None:
        return self._navs.find_latest(scheme_code)

    def ensure_history(self, scheme_code: int) -> LatestNav | None:
        """Latest NAV for a scheme, backfilling history first if it is missing.

        Returns:
            The latest NAV row, or None if the scheme still has no NAV
        """
        latest = self._navs.find_latest(scheme_code)
        if latest is not None or self._client is None:
            return latest

        self.backfill(scheme_code)
        return self._navs.find_latest(scheme_code)

    def backfill(self, scheme_code: int) -> int:
        """Fetch and store recent history and refresh the latest NAV.

        Returns:
            Number of history rows inserted (0 when the fetch failed)
        """
        if self._client is None:
            return 0

        result = self._client.fetch_history(scheme_code, limit=self._limit)
        if isinstance(result, NavFetchFailure):
            logger.warning("NAV history backfill failed for scheme %s: %s", scheme_code, result.reason)
            return 0

        newest = max(result, key=lambda quote: quote.nav_date)
        try:
            inserted = self._navs.bulk_insert_history(
                scheme_code, [(quote.nav_date, quote.nav) for quote in result]
            )
            self._navs.upsert_latest(scheme_code, newest.nav, newest.nav_date)
            self._navs.commit()
        except Exception:
            self._navs.rollback()
            raise

        logger.info(
            "Backfilled %d NAV history rows for scheme %s (latest %s on %s)",
            inserted,
            scheme_code,
            newest.nav,
            newest.nav_date,
        )
        return inserted
