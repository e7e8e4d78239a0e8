"""Portfolio valuation service - single source of truth for value calculations.

Holdings are valued against the stored latest NAV of their scheme. Missing
reference or price data never fails a valuation: the holding is reported
with placeholder names and a zero value.

Invested value is approximated (see ``APPROX_INVESTED_RATIO``) because no
purchase ledger is kept.
"""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from navfolio.constants import APPROX_INVESTED_RATIO, Placeholder
from navfolio.models import Holding, LatestNav, Scheme
from navfolio.services.portfolio.nav_history_service import NavHistoryService
from navfolio.services.portfolio.valuation_types import HoldingValuation, PortfolioValuation
from navfolio.services.repositories.holding_repository import HoldingRepository

logger = logging.getLogger(__name__)


class PortfolioValuationService:
    """Values a user's holdings and aggregates profit and loss."""

    def __init__(self, db: Session, history_service: NavHistoryService | None = None) -> None:
        self._holdings = HoldingRepository(db)
        self._history_service = history_service

    def list_holdings(self, user_id: str) -> list[HoldingValuation]:
        """Value every holding of a user, in the order they were added."""
        return [
            self.calculate_holding_value(holding, scheme, latest)
            for holding, scheme, latest in self._load_rows(user_id)
        ]

    def summarize(self, user_id: str, today: date | None = None) -> PortfolioValuation:
        """Aggregate valuation of a user's portfolio.

        Args:
            user_id: Owner of the holdings
            today: Valuation date reported as ``as_on`` (default: today)
        """
        valuation = PortfolioValuation(as_on=today or date.today())
        for value in self.list_holdings(user_id):
            valuation.holdings.append(value)
            valuation.current_value += value.current_value
            valuation.total_invested += value.invested_value
        return valuation

    def calculate_holding_value(
        self,
        holding: Holding,
        scheme: Scheme | None,
        latest: LatestNav | None,
    ) -> HoldingValuation:
        """Calculate value for a single holding.

        Args:
            holding: The holding to value
            scheme: Catalogue entry, or None if the scheme is unknown
            latest: Latest NAV, or None if none is stored
        """
        nav = latest.nav if latest is not None else Decimal("0")
        current_value = holding.units * nav

        return HoldingValuation(
            holding_id=holding.id,
            scheme_code=holding.scheme_code,
            scheme_name=scheme.scheme_name if scheme is not None else Placeholder.SCHEME_NAME,
            fund_house=(scheme.fund_house if scheme is not None else None) or Placeholder.FUND_HOUSE,
            units=holding.units,
            nav=nav,
            nav_date=latest.nav_date if latest is not None else None,
            nav_available=latest is not None,
            current_value=current_value,
            invested_value=current_value * APPROX_INVESTED_RATIO,
            created_at=holding.created_at,
        )

    def _load_rows(self, user_id: str) -> list[tuple[Holding, Scheme | None, LatestNav | None]]:
        rows = self._holdings.find_valuation_rows(user_id)
        if self._history_service is None:
            return rows

        loaded = []
        for holding, scheme, latest in rows:
            if latest is None:
                latest = self._history_service.ensure_history(holding.scheme_code)
                if latest is None:
                    logger.info("No NAV available for scheme %s, valuing at 0", holding.scheme_code)
            loaded.append((holding, scheme, latest))
        return loaded
