"""NAV price store data access layer.

Two collections live here:
- fund_latest_nav: one row per scheme, overwritten on every refresh
- fund_nav_history: append-only, unique on (scheme_code, nav_date)
"""

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from navfolio.models import LatestNav, NavHistory
from navfolio.services.repositories._upsert import insert_for

logger = logging.getLogger(__name__)


class NavRepository:
    """Centralized NAV data access (implements ``NavStore``).

    Naming conventions:
    - find_* : Query that may return None or empty list
    - upsert_* : Insert or update in a single atomic statement
    - count_* : Row totals
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_latest(self, scheme_code: int) -> LatestNav | None:
        """Find the latest NAV row for a scheme."""
        return (
            self._db.query(LatestNav)
            .populate_existing()
            .filter(LatestNav.scheme_code == scheme_code)
            .first()
        )

    def upsert_latest(self, scheme_code: int, nav: Decimal, nav_date: date) -> None:
        """Insert or overwrite the latest NAV for a scheme (last writer wins)."""
        stmt = insert_for(self._db, LatestNav).values(
            scheme_code=scheme_code,
            nav=nav,
            nav_date=nav_date,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["scheme_code"],
            set_={
                "nav": stmt.excluded.nav,
                "nav_date": stmt.excluded.nav_date,
                "updated_at": func.now(),
            },
        )
        self._db.execute(stmt)

    def upsert_history_if_absent(self, scheme_code: int, nav: Decimal, nav_date: date) -> bool:
        """Append a history row unless one exists for (scheme_code, nav_date).

        Returns:
            True if a row was inserted, False if the date was already stored
        """
        stmt = (
            insert_for(self._db, NavHistory)
            .values(scheme_code=scheme_code, nav=nav, nav_date=nav_date)
            .on_conflict_do_nothing(index_elements=["scheme_code", "nav_date"])
        )
        result = self._db.execute(stmt)
        return result.rowcount == 1

    def bulk_insert_history(self, scheme_code: int, entries: Iterable[tuple[date, Decimal]]) -> int:
        """Insert many history rows for one scheme, skipping dates already stored.

        Returns:
            Number of rows actually inserted
        """
        rows = [
            {"scheme_code": scheme_code, "nav_date": nav_date, "nav": nav}
            for nav_date, nav in entries
        ]
        if not rows:
            return 0

        stmt = (
            insert_for(self._db, NavHistory)
            .values(rows)
            .on_conflict_do_nothing(index_elements=["scheme_code", "nav_date"])
        )
        result = self._db.execute(stmt)
        inserted = max(result.rowcount, 0)
        if inserted < len(rows):
            logger.debug(
                "Skipped %d existing history rows for scheme %s", len(rows) - inserted, scheme_code
            )
        return inserted

    def find_history(self, scheme_code: int, limit: int = 30) -> list[NavHistory]:
        """Find the newest history rows for a scheme, newest first."""
        return (
            self._db.query(NavHistory)
            .filter(NavHistory.scheme_code == scheme_code)
            .order_by(desc(NavHistory.nav_date))
            .limit(limit)
            .all()
        )

    def count_latest(self) -> int:
        return self._db.query(func.count(LatestNav.id)).scalar() or 0

    def count_history(self) -> int:
        return self._db.query(func.count(NavHistory.id)).scalar() or 0

    def commit(self) -> None:
        self._db.commit()

    def rollback(self) -> None:
        self._db.rollback()
