"""Tests for NavRepository."""

from datetime import date
from decimal import Decimal

from navfolio.models import NavHistory
from navfolio.services.repositories.nav_repository import NavRepository


class TestLatestNav:
    def test_upsert_creates_row(self, db):
        repo = NavRepository(db)
        repo.upsert_latest(100, Decimal("10.5"), date(2026, 1, 15))
        repo.commit()

        latest = repo.find_latest(100)
        assert latest is not None
        assert latest.nav == Decimal("10.5000")
        assert latest.nav_date == date(2026, 1, 15)

    def test_upsert_overwrites_existing_row(self, db):
        repo = NavRepository(db)
        repo.upsert_latest(100, Decimal("10.5"), date(2026, 1, 15))
        repo.commit()
        repo.find_latest(100)

        repo.upsert_latest(100, Decimal("11.25"), date(2026, 1, 16))
        repo.commit()

        latest = repo.find_latest(100)
        assert latest.nav == Decimal("11.2500")
        assert latest.nav_date == date(2026, 1, 16)
        assert repo.count_latest() == 1

    def test_find_latest_returns_none_if_missing(self, db):
        assert NavRepository(db).find_latest(999) is None


class TestNavHistory:
    def test_history_upsert_is_idempotent(self, db):
        """Re-observing a date keeps one row with the first NAV."""
        repo = NavRepository(db)

        assert repo.upsert_history_if_absent(100, Decimal("10.0"), date(2026, 1, 15)) is True
        assert repo.upsert_history_if_absent(100, Decimal("99.0"), date(2026, 1, 15)) is False
        repo.commit()

        rows = db.query(NavHistory).filter(NavHistory.scheme_code == 100).all()
        assert len(rows) == 1
        assert rows[0].nav == Decimal("10.0000")

    def test_same_date_different_scheme_is_allowed(self, db):
        repo = NavRepository(db)
        assert repo.upsert_history_if_absent(100, Decimal("10.0"), date(2026, 1, 15))
        assert repo.upsert_history_if_absent(101, Decimal("20.0"), date(2026, 1, 15))
        repo.commit()
        assert repo.count_history() == 2

    def test_bulk_insert_skips_existing_dates(self, db):
        repo = NavRepository(db)
        repo.upsert_history_if_absent(100, Decimal("10.0"), date(2026, 1, 15))
        repo.commit()

        inserted = repo.bulk_insert_history(
            100,
            [
                (date(2026, 1, 16), Decimal("10.5")),
                (date(2026, 1, 15), Decimal("99.0")),
                (date(2026, 1, 14), Decimal("9.5")),
            ],
        )
        repo.commit()

        assert inserted == 2
        assert repo.count_history() == 3

    def test_bulk_insert_empty(self, db):
        assert NavRepository(db).bulk_insert_history(100, []) == 0

    def test_find_history_orders_by_true_date(self, db):
        """Dates spanning a month boundary sort chronologically, not as strings."""
        repo = NavRepository(db)
        repo.bulk_insert_history(
            100,
            [
                (date(2026, 1, 31), Decimal("10.0")),
                (date(2026, 2, 2), Decimal("10.2")),
                (date(2025, 12, 15), Decimal("9.0")),
                (date(2026, 2, 1), Decimal("10.1")),
            ],
        )
        repo.commit()

        history = repo.find_history(100, limit=3)
        assert [row.nav_date for row in history] == [
            date(2026, 2, 2),
            date(2026, 2, 1),
            date(2026, 1, 31),
        ]
