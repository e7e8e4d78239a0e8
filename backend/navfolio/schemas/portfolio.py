"""Pydantic schemas for portfolio endpoints.

Money is rounded to 2 decimal places and NAVs to 4 here, and nowhere else.
NAV dates are rendered as DD-MM-YYYY, or "N/A" when no NAV is stored.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from navfolio.constants import MIN_UNITS, UNITS_DECIMAL_PLACES, Placeholder
from navfolio.models import Holding, Scheme
from navfolio.services.portfolio.valuation_types import (
    HoldingValuation,
    PortfolioValuation,
    quantize_money,
    quantize_nav,
)
from navfolio.utils.nav_dates import format_nav_date


class AddHoldingRequest(BaseModel):
    """Add units of a scheme to the caller's portfolio."""

    scheme_code: int = Field(..., gt=0, description="mfapi.in scheme code")
    units: Decimal = Field(
        ..., ge=MIN_UNITS, decimal_places=UNITS_DECIMAL_PLACES, description="Units to add"
    )


class HoldingResponse(BaseModel):
    """A stored holding."""

    id: int
    scheme_code: int
    scheme_name: str
    units: float
    added_at: datetime | None = None

    @classmethod
    def from_holding(cls, holding: Holding, scheme: Scheme | None) -> "HoldingResponse":
        return cls(
            id=holding.id,
            scheme_code=holding.scheme_code,
            scheme_name=scheme.scheme_name if scheme else Placeholder.SCHEME_NAME,
            units=float(holding.units),
            added_at=holding.created_at,
        )


class AddHoldingResponse(BaseModel):
    message: str
    created: bool = Field(..., description="False when units were added to an existing holding")
    holding: HoldingResponse


class HoldingListItem(BaseModel):
    """One holding valued at its scheme's latest NAV."""

    scheme_code: int
    scheme_name: str
    fund_house: str
    units: float
    current_nav: float
    current_value: float
    nav_date: str
    nav_available: bool

    @classmethod
    def from_valuation(cls, value: HoldingValuation) -> "HoldingListItem":
        return cls(
            scheme_code=value.scheme_code,
            scheme_name=value.scheme_name,
            fund_house=value.fund_house,
            units=float(value.units),
            current_nav=float(quantize_nav(value.nav)),
            current_value=float(quantize_money(value.current_value)),
            nav_date=format_nav_date(value.nav_date) if value.nav_date else Placeholder.NAV_DATE,
            nav_available=value.nav_available,
        )


class PortfolioListResponse(BaseModel):
    total_holdings: int
    total_value: float
    holdings: list[HoldingListItem]

    @classmethod
    def from_valuations(cls, values: list[HoldingValuation]) -> "PortfolioListResponse":
        total = sum((value.current_value for value in values), Decimal("0"))
        return cls(
            total_holdings=len(values),
            total_value=float(quantize_money(total)),
            holdings=[HoldingListItem.from_valuation(value) for value in values],
        )


class HoldingValueItem(BaseModel):
    """Per-holding profit and loss."""

    scheme_code: int
    scheme_name: str
    units: float
    current_nav: float
    current_value: float
    invested_value: float
    profit_loss: float
    nav_available: bool

    @classmethod
    def from_valuation(cls, value: HoldingValuation) -> "HoldingValueItem":
        return cls(
            scheme_code=value.scheme_code,
            scheme_name=value.scheme_name,
            units=float(value.units),
            current_nav=float(quantize_nav(value.nav)),
            current_value=float(quantize_money(value.current_value)),
            invested_value=float(quantize_money(value.invested_value)),
            profit_loss=float(quantize_money(value.profit_loss)),
            nav_available=value.nav_available,
        )


class PortfolioValueResponse(BaseModel):
    """Portfolio profit and loss summary.

    ``total_investment`` is an approximation (90% of current value) until
    purchase prices are recorded.
    """

    total_investment: float
    current_value: float
    profit_loss: float
    profit_loss_percent: float
    as_on: str = Field(..., description="Valuation date, DD-MM-YYYY")
    holdings: list[HoldingValueItem]

    @classmethod
    def from_valuation(cls, valuation: PortfolioValuation) -> "PortfolioValueResponse":
        return cls(
            total_investment=float(quantize_money(valuation.total_invested)),
            current_value=float(quantize_money(valuation.current_value)),
            profit_loss=float(quantize_money(valuation.profit_loss)),
            profit_loss_percent=float(quantize_money(valuation.profit_loss_percent)),
            as_on=format_nav_date(valuation.as_on),
            holdings=[HoldingValueItem.from_valuation(value) for value in valuation.holdings],
        )
