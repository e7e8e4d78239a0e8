"""Portfolio services: holdings, valuation and NAV history."""

from .holdings_service import AddHoldingResult, HoldingsService
from .nav_history_service import NavHistoryService
from .valuation_service import PortfolioValuationService
from .valuation_types import HoldingValuation, PortfolioValuation, quantize_money, quantize_nav

__all__ = [
    "AddHoldingResult",
    "HoldingValuation",
    "HoldingsService",
    "NavHistoryService",
    "PortfolioValuation",
    "PortfolioValuationService",
    "quantize_money",
    "quantize_nav",
]
