"""Store interfaces the NAV ingestion pipeline depends on.

The ingestion service only talks to these protocols, so it can run against
the SQLAlchemy repositories or an in-memory fake.
"""

from datetime import date
from decimal import Decimal
from typing import Protocol


class NavStore(Protocol):
    """Latest NAV snapshot plus append-only NAV history."""

    def upsert_latest(self, scheme_code: int, nav: Decimal, nav_date: date) -> None:
        """Insert or overwrite the latest NAV row for a scheme."""
        ...

    def upsert_history_if_absent(self, scheme_code: int, nav: Decimal, nav_date: date) -> bool:
        """Insert a history row unless (scheme_code, nav_date) exists. True if inserted."""
        ...

    def count_latest(self) -> int: ...

    def count_history(self) -> int: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class HolderSchemeSource(Protocol):
    """Anything that can list the schemes currently held by any user."""

    def find_holder_scheme_ids(self) -> list[int]:
        """Distinct held scheme codes in ascending order.

        Raises:
            SchemeListError: If the list cannot be obtained
        """
        ...
