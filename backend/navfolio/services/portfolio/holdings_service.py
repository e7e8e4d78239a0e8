"""Adding and removing portfolio holdings."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from navfolio.constants import MIN_UNITS, UNITS_DECIMAL_PLACES
from navfolio.models import Holding, Scheme
from navfolio.services.exceptions import ValidationError
from navfolio.services.repositories.holding_repository import HoldingRepository
from navfolio.services.repositories.scheme_repository import SchemeRepository

logger = logging.getLogger(__name__)


@dataclass
class AddHoldingResult:
    holding: Holding
    scheme: Scheme
    created: bool


class HoldingsService:
    """Write operations on a user's holdings. Each call commits on success."""

    def __init__(self, db: Session) -> None:
        self._db = db
        self._holdings = HoldingRepository(db)
        self._schemes = SchemeRepository(db)

    def add_units(self, user_id: str, scheme_code: int, units: Decimal) -> AddHoldingResult:
        """Add units of a scheme, creating the holding if the user has none.

        Raises:
            ValidationError: If scheme_code is not positive or units is below the minimum
            NotFoundError: If the scheme is not in the catalogue
        """
        if scheme_code <= 0:
            raise ValidationError("Scheme code must be a positive integer", field="scheme_code")
        if not units.is_finite() or units < MIN_UNITS:
            raise ValidationError(f"Units must be at least {MIN_UNITS}", field="units")
        if units.normalize().as_tuple().exponent < -UNITS_DECIMAL_PLACES:
            raise ValidationError(
                f"Units can have at most {UNITS_DECIMAL_PLACES} decimal places", field="units"
            )

        scheme = self._schemes.get_by_code(scheme_code)
        try:
            holding, created = self._holdings.add_units(user_id, scheme_code, units)
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

        logger.info(
            "%s %s units of scheme %s for user %s",
            "Added" if created else "Incremented",
            units,
            scheme_code,
            user_id,
        )
        return AddHoldingResult(holding=holding, scheme=scheme, created=created)

    def remove(self, user_id: str, scheme_code: int) -> Holding:
        """Remove a user's holding in one scheme.

        Raises:
            NotFoundError: If the user does not hold the scheme
        """
        holding = self._holdings.delete_by_user_and_scheme(user_id, scheme_code)
        self._db.commit()
        logger.info("Removed scheme %s from portfolio of user %s", scheme_code, user_id)
        return holding
