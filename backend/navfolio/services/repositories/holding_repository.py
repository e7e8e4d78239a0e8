"""Holding data access layer.

Holdings are unique per (user_id, scheme_code). Repeat purchases increment
``units`` in place through a single upsert so concurrent requests can never
create a second row.
"""

import logging
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from navfolio.models import Holding, LatestNav, Scheme
from navfolio.services.repositories._upsert import insert_for
from navfolio.services.repositories.exceptions import NotFoundError, SchemeListError

logger = logging.getLogger(__name__)


class HoldingRepository:
    """Centralized holding data access (implements ``HolderSchemeSource``).

    Naming conventions:
    - find_* : Query that may return None
    - get_* : Query that raises NotFoundError if missing
    - add_* : Upsert pattern
    - delete_* : Remove record
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_user_and_scheme(self, user_id: str, scheme_code: int) -> Holding | None:
        """Find a user's holding in one scheme."""
        return (
            self._db.query(Holding)
            .populate_existing()
            .filter(Holding.user_id == user_id, Holding.scheme_code == scheme_code)
            .first()
        )

    def get_by_user_and_scheme(self, user_id: str, scheme_code: int) -> Holding:
        """Get a user's holding in one scheme.

        Raises:
            NotFoundError: If the user does not hold the scheme
        """
        holding = self.find_by_user_and_scheme(user_id, scheme_code)
        if holding is None:
            raise NotFoundError("Holding", f"{user_id}/{scheme_code}")
        return holding

    def add_units(self, user_id: str, scheme_code: int, units: Decimal) -> tuple[Holding, bool]:
        """Create the holding or increment its units.

        Returns:
            Tuple of (holding, created) where created is True if new record.
        """
        created = self.find_by_user_and_scheme(user_id, scheme_code) is None

        stmt = insert_for(self._db, Holding).values(
            user_id=user_id,
            scheme_code=scheme_code,
            units=units,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "scheme_code"],
            set_={
                "units": Holding.units + stmt.excluded.units,
                "updated_at": func.now(),
            },
        )
        self._db.execute(stmt)

        holding = self.get_by_user_and_scheme(user_id, scheme_code)
        logger.debug(
            "%s holding for user %s, scheme %s (units=%s)",
            "Created" if created else "Incremented",
            user_id,
            scheme_code,
            holding.units,
        )
        return holding, created

    def delete_by_user_and_scheme(self, user_id: str, scheme_code: int) -> Holding:
        """Delete a user's holding in one scheme.

        Raises:
            NotFoundError: If the user does not hold the scheme (nothing is deleted)
        """
        holding = self.get_by_user_and_scheme(user_id, scheme_code)
        self._db.delete(holding)
        self._db.flush()
        return holding

    def find_holder_scheme_ids(self) -> list[int]:
        """Distinct scheme codes held by any user, ascending.

        Raises:
            SchemeListError: If the query fails
        """
        try:
            rows = (
                self._db.query(Holding.scheme_code)
                .distinct()
                .order_by(Holding.scheme_code)
                .all()
            )
        except SQLAlchemyError as e:
            raise SchemeListError(f"Could not read held schemes: {e}") from e
        return [row.scheme_code for row in rows]

    def find_valuation_rows(
        self, user_id: str
    ) -> list[tuple[Holding, Scheme | None, LatestNav | None]]:
        """Holdings of a user left-joined to scheme details and latest NAV.

        Holdings whose scheme or NAV is missing are still returned, with None
        in the corresponding slot.
        """
        return (
            self._db.query(Holding, Scheme, LatestNav)
            .outerjoin(Scheme, Scheme.scheme_code == Holding.scheme_code)
            .outerjoin(LatestNav, LatestNav.scheme_code == Holding.scheme_code)
            .filter(Holding.user_id == user_id)
            .order_by(Holding.created_at, Holding.id)
            .populate_existing()
            .all()
        )
