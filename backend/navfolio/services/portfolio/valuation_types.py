"""Value objects for portfolio valuation.

Amounts are kept at full precision here. Rounding happens once, when a
valuation is turned into a response.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from navfolio.constants import MONEY_PLACES, NAV_PLACES


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def quantize_nav(value: Decimal) -> Decimal:
    return value.quantize(NAV_PLACES, rounding=ROUND_HALF_UP)


@dataclass
class HoldingValuation:
    """Calculated values for a single holding."""

    holding_id: int
    scheme_code: int
    scheme_name: str
    fund_house: str
    units: Decimal

    # Zero with nav_available=False when no latest NAV is stored
    nav: Decimal
    nav_date: date | None
    nav_available: bool

    current_value: Decimal
    invested_value: Decimal

    created_at: datetime | None = None

    @property
    def profit_loss(self) -> Decimal:
        return self.current_value - self.invested_value


@dataclass
class PortfolioValuation:
    """Aggregated valuation of one user's holdings."""

    as_on: date
    total_invested: Decimal = Decimal("0")
    current_value: Decimal = Decimal("0")
    holdings: list[HoldingValuation] = field(default_factory=list)

    @property
    def profit_loss(self) -> Decimal:
        return self.current_value - self.total_invested

    @property
    def profit_loss_percent(self) -> Decimal:
        if self.total_invested == 0:
            return Decimal("0")
        return self.profit_loss / self.total_invested * 100

    @property
    def total_holdings(self) -> int:
        return len(self.holdings)
