"""Tests for SchemeRepository."""

import pytest

from navfolio.services.repositories.exceptions import NotFoundError
from navfolio.services.repositories.scheme_repository import SchemeRepository


def _row(code: int, name: str = "Fund", house: str = "House") -> dict:
    return {"scheme_code": code, "scheme_name": name, "fund_house": house}


class TestSchemeRepository:
    def test_insert_ignores_duplicates(self, db):
        repo = SchemeRepository(db)
        assert repo.insert_ignoring_duplicates([_row(100), _row(101)]) == 2
        db.commit()

        assert repo.insert_ignoring_duplicates([_row(101, name="Renamed"), _row(102)]) == 1
        db.commit()

        assert repo.count() == 3
        assert repo.get_by_code(101).scheme_name == "Fund"

    def test_insert_empty(self, db):
        assert SchemeRepository(db).insert_ignoring_duplicates([]) == 0

    def test_get_by_code_raises_when_missing(self, db):
        with pytest.raises(NotFoundError) as exc_info:
            SchemeRepository(db).get_by_code(42)
        assert exc_info.value.identifier == 42

    def test_find_by_code_returns_none(self, db):
        assert SchemeRepository(db).find_by_code(42) is None
