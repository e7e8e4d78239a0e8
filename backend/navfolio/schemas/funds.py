"""Pydantic schemas for fund (scheme) endpoints."""

from pydantic import BaseModel, Field

from navfolio.constants import Placeholder
from navfolio.models import LatestNav, NavHistory, Scheme
from navfolio.services.catalogue.scheme_catalogue_service import CatalogueSyncResult
from navfolio.services.market_data.mfapi_client import NavQuote
from navfolio.services.portfolio.valuation_types import quantize_nav
from navfolio.utils.nav_dates import format_nav_date


class NavPoint(BaseModel):
    date: str = Field(..., description="NAV date, DD-MM-YYYY")
    nav: float


class NavHistoryResponse(BaseModel):
    """Recent NAV history of a scheme, newest first."""

    scheme_code: int
    scheme_name: str
    current_nav: float
    as_on: str = Field(..., description="Date of the current NAV, DD-MM-YYYY or N/A")
    history: list[NavPoint]

    @classmethod
    def build(
        cls, scheme: Scheme, latest: LatestNav | None, history: list[NavHistory]
    ) -> "NavHistoryResponse":
        return cls(
            scheme_code=scheme.scheme_code,
            scheme_name=scheme.scheme_name,
            current_nav=float(quantize_nav(latest.nav)) if latest else 0.0,
            as_on=format_nav_date(latest.nav_date) if latest else Placeholder.NAV_DATE,
            history=[
                NavPoint(date=format_nav_date(row.nav_date), nav=float(quantize_nav(row.nav)))
                for row in history
            ],
        )


class NavUpdateResponse(BaseModel):
    """Result of refreshing one scheme's latest NAV."""

    message: str
    scheme_code: int
    nav: float
    date: str

    @classmethod
    def from_quote(cls, quote: NavQuote) -> "NavUpdateResponse":
        return cls(
            message=f"NAV updated for scheme {quote.scheme_code}",
            scheme_code=quote.scheme_code,
            nav=float(quantize_nav(quote.nav)),
            date=format_nav_date(quote.nav_date),
        )


class CatalogueSyncResponse(BaseModel):
    """Statistics of a scheme catalogue sync."""

    message: str
    inserted: int = Field(..., description="Schemes added to the catalogue")
    duplicates: int = Field(..., description="Schemes already present")
    external_total: int = Field(..., description="Schemes listed by the NAV source")

    @classmethod
    def from_result(cls, result: CatalogueSyncResult) -> "CatalogueSyncResponse":
        return cls(
            message=f"Synced {result.inserted} new schemes",
            inserted=result.inserted,
            duplicates=result.duplicates,
            external_total=result.external_total,
        )
