"""Scheme catalogue data access layer."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func
from sqlalchemy.orm import Session

from navfolio.models import Scheme
from navfolio.services.repositories._upsert import insert_for
from navfolio.services.repositories.exceptions import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class SchemeRepository:
    """Centralized scheme reference data access."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_code(self, scheme_code: int) -> Scheme | None:
        """Find a scheme by its code."""
        return self._db.query(Scheme).filter(Scheme.scheme_code == scheme_code).first()

    def get_by_code(self, scheme_code: int) -> Scheme:
        """Get a scheme by its code.

        Raises:
            NotFoundError: If the scheme is not in the catalogue
        """
        scheme = self.find_by_code(scheme_code)
        if scheme is None:
            raise NotFoundError("Scheme", scheme_code)
        return scheme

    def insert_ignoring_duplicates(self, rows: "Sequence[dict]") -> int:
        """Insert catalogue rows, skipping scheme codes that already exist.

        Args:
            rows: Dicts with scheme_code, scheme_name and fund_house

        Returns:
            Number of rows actually inserted
        """
        if not rows:
            return 0
        stmt = (
            insert_for(self._db, Scheme)
            .values(list(rows))
            .on_conflict_do_nothing(index_elements=["scheme_code"])
        )
        result = self._db.execute(stmt)
        return max(result.rowcount, 0)

    def count(self) -> int:
        return self._db.query(func.count(Scheme.scheme_code)).scalar() or 0
