"""Tests for HoldingRepository."""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from navfolio.models import Holding, LatestNav, Scheme
from navfolio.services.repositories.exceptions import NotFoundError, SchemeListError
from navfolio.services.repositories.holding_repository import HoldingRepository

USER = "user-1"


class TestAddUnits:
    def test_creates_holding(self, db):
        repo = HoldingRepository(db)
        holding, created = repo.add_units(USER, 100, Decimal("5"))
        db.commit()

        assert created is True
        assert holding.units == Decimal("5")
        assert holding.scheme_code == 100

    def test_add_twice_increments_single_row(self, db):
        repo = HoldingRepository(db)
        repo.add_units(USER, 100, Decimal("5"))
        holding, created = repo.add_units(USER, 100, Decimal("2.5"))
        db.commit()

        assert created is False
        assert holding.units == Decimal("7.5")
        assert db.query(Holding).filter(Holding.user_id == USER).count() == 1

    def test_holdings_are_per_user(self, db):
        repo = HoldingRepository(db)
        repo.add_units(USER, 100, Decimal("5"))
        repo.add_units("user-2", 100, Decimal("1"))
        db.commit()

        assert repo.get_by_user_and_scheme(USER, 100).units == Decimal("5")
        assert repo.get_by_user_and_scheme("user-2", 100).units == Decimal("1")


class TestDelete:
    def test_delete_existing(self, db):
        repo = HoldingRepository(db)
        repo.add_units(USER, 100, Decimal("5"))
        db.commit()

        repo.delete_by_user_and_scheme(USER, 100)
        db.commit()

        assert repo.find_by_user_and_scheme(USER, 100) is None

    def test_delete_missing_raises_without_mutation(self, db):
        repo = HoldingRepository(db)
        repo.add_units(USER, 100, Decimal("5"))
        repo.add_units("user-2", 101, Decimal("3"))
        db.commit()

        with pytest.raises(NotFoundError):
            repo.delete_by_user_and_scheme(USER, 101)

        assert db.query(Holding).count() == 2


class TestHolderSchemes:
    def test_distinct_ascending(self, db):
        repo = HoldingRepository(db)
        repo.add_units(USER, 300, Decimal("1"))
        repo.add_units(USER, 100, Decimal("1"))
        repo.add_units("user-2", 100, Decimal("1"))
        repo.add_units("user-2", 200, Decimal("1"))
        db.commit()

        assert repo.find_holder_scheme_ids() == [100, 200, 300]

    def test_empty(self, db):
        assert HoldingRepository(db).find_holder_scheme_ids() == []

    def test_query_failure_raises_scheme_list_error(self, db):
        error = OperationalError("SELECT scheme_code", {}, Exception("database is locked"))

        with patch.object(db, "query", side_effect=error):
            with pytest.raises(SchemeListError) as exc_info:
                HoldingRepository(db).find_holder_scheme_ids()

        assert exc_info.value.__cause__ is error


class TestValuationRows:
    def test_left_joins_missing_scheme_and_nav(self, db):
        db.add(Scheme(scheme_code=100, scheme_name="Known Fund", fund_house="House"))
        db.add(LatestNav(scheme_code=100, nav=Decimal("20"), nav_date=date(2026, 1, 15)))
        db.commit()

        repo = HoldingRepository(db)
        repo.add_units(USER, 100, Decimal("1"))
        repo.add_units(USER, 200, Decimal("2"))
        db.commit()

        rows = repo.find_valuation_rows(USER)
        by_code = {holding.scheme_code: (scheme, latest) for holding, scheme, latest in rows}

        assert by_code[100][0].scheme_name == "Known Fund"
        assert by_code[100][1].nav == Decimal("20.0000")
        assert by_code[200] == (None, None)

    def test_only_returns_own_holdings(self, db):
        repo = HoldingRepository(db)
        repo.add_units(USER, 100, Decimal("1"))
        repo.add_units("user-2", 200, Decimal("2"))
        db.commit()

        rows = repo.find_valuation_rows(USER)
        assert [holding.scheme_code for holding, _, _ in rows] == [100]
