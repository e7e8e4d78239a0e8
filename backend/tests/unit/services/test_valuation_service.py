"""Tests for PortfolioValuationService."""

from datetime import date
from decimal import Decimal

from navfolio.constants import Placeholder
from navfolio.models import Holding, LatestNav, Scheme
from navfolio.schemas.portfolio import PortfolioValueResponse
from navfolio.services.portfolio.nav_history_service import NavHistoryService
from navfolio.services.portfolio.valuation_service import PortfolioValuationService
from tests.conftest import TEST_USER_ID
from tests.fixtures.fakes import FakeNavClient, quote


class TestSummarize:
    def test_ten_units_at_fifty(self, db, test_holding):
        """10 units at NAV 50: value 500, invested 450, P&L 50 (11.11%)."""
        valuation = PortfolioValuationService(db).summarize(TEST_USER_ID, today=date(2026, 1, 16))

        assert valuation.current_value == Decimal("500")
        assert valuation.total_invested == Decimal("450")
        assert valuation.profit_loss == Decimal("50")
        assert round(valuation.profit_loss_percent, 2) == Decimal("11.11")
        assert valuation.as_on == date(2026, 1, 16)

        response = PortfolioValueResponse.from_valuation(valuation)
        assert response.current_value == 500.0
        assert response.total_investment == 450.0
        assert response.profit_loss == 50.0
        assert response.profit_loss_percent == 11.11
        assert response.as_on == "16-01-2026"

    def test_empty_portfolio(self, db):
        valuation = PortfolioValuationService(db).summarize(TEST_USER_ID)

        assert valuation.holdings == []
        assert valuation.current_value == 0
        assert valuation.profit_loss_percent == 0

    def test_aggregates_multiple_holdings(self, db, test_holding):
        db.add(Scheme(scheme_code=200, scheme_name="Second Fund", fund_house="House"))
        db.add(LatestNav(scheme_code=200, nav=Decimal("12.3456"), nav_date=date(2026, 1, 15)))
        db.add(Holding(user_id=TEST_USER_ID, scheme_code=200, units=Decimal("3")))
        db.commit()

        valuation = PortfolioValuationService(db).summarize(TEST_USER_ID)

        assert valuation.total_holdings == 2
        assert valuation.current_value == Decimal("500") + Decimal("3") * Decimal("12.3456")


class TestMissingData:
    def test_missing_nav_values_at_zero(self, db, test_scheme):
        db.add(Holding(user_id=TEST_USER_ID, scheme_code=test_scheme.scheme_code, units=Decimal("4")))
        db.commit()

        [value] = PortfolioValuationService(db).list_holdings(TEST_USER_ID)

        assert value.nav == 0
        assert value.current_value == 0
        assert value.nav_available is False
        assert value.nav_date is None
        assert value.scheme_name == test_scheme.scheme_name

    def test_missing_scheme_uses_placeholders(self, db):
        db.add(Holding(user_id=TEST_USER_ID, scheme_code=555, units=Decimal("1")))
        db.commit()

        [value] = PortfolioValuationService(db).list_holdings(TEST_USER_ID)

        assert value.scheme_name == Placeholder.SCHEME_NAME
        assert value.fund_house == Placeholder.FUND_HOUSE
        assert value.current_value == 0

    def test_missing_nav_backfilled_when_history_service_wired(self, db, test_scheme):
        code = test_scheme.scheme_code
        db.add(Holding(user_id=TEST_USER_ID, scheme_code=code, units=Decimal("2")))
        db.commit()
        client = FakeNavClient(
            history={
                code: [quote(code, "21.5", date(2026, 1, 15)), quote(code, "21.0", date(2026, 1, 14))]
            }
        )

        service = PortfolioValuationService(db, history_service=NavHistoryService(db, client))
        [value] = service.list_holdings(TEST_USER_ID)

        assert value.nav_available is True
        assert value.nav == Decimal("21.5000")
        assert value.current_value == Decimal("43.0")

    def test_failed_backfill_degrades_to_zero(self, db, test_scheme):
        db.add(Holding(user_id=TEST_USER_ID, scheme_code=test_scheme.scheme_code, units=Decimal("2")))
        db.commit()

        service = PortfolioValuationService(db, history_service=NavHistoryService(db, FakeNavClient()))
        [value] = service.list_holdings(TEST_USER_ID)

        assert value.nav_available is False
        assert value.current_value == 0
