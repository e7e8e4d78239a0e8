"""Shared test fixtures.

The app runs against an in-memory SQLite database with the NAV source
replaced by ``FakeNavClient``; the in-process scheduler is disabled.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["NAV_SCHEDULER_ENABLED"] = "false"

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import jwt  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from navfolio.config import settings  # noqa: E402
from navfolio.database import Base, get_db  # noqa: E402
from navfolio.dependencies.services import (  # noqa: E402
    get_catalogue_client,
    get_ingestion_service,
    get_nav_client,
)
from navfolio.main import app  # noqa: E402
from navfolio.models import Holding, LatestNav, Scheme  # noqa: E402
from navfolio.services.ingestion.nav_ingestion_service import NavIngestionService  # noqa: E402
from navfolio.services.repositories import HoldingRepository, NavRepository  # noqa: E402
from tests.fixtures.fakes import FakeNavClient  # noqa: E402

TEST_USER_ID = "4f1c2a9e-0000-4000-8000-000000000001"
OTHER_USER_ID = "4f1c2a9e-0000-4000-8000-000000000002"
SERVICE_USER_ID = "airflow-service"


def make_token(subject: str, service: bool = False) -> str:
    payload = {"sub": subject, "type": "access"}
    if service:
        payload["svc"] = True
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_nav_client():
    return FakeNavClient()


@pytest.fixture
def client(db, fake_nav_client):
    """Test client with database and NAV source overrides."""

    def override_get_db():
        yield db

    def override_nav_client():
        yield fake_nav_client

    def override_ingestion_service():
        return NavIngestionService(
            NavRepository(db),
            HoldingRepository(db),
            fake_nav_client,
            sleep=lambda seconds: None,
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_nav_client] = override_nav_client
    app.dependency_overrides[get_catalogue_client] = override_nav_client
    app.dependency_overrides[get_ingestion_service] = override_ingestion_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {make_token(TEST_USER_ID)}"}


@pytest.fixture
def other_user_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}


@pytest.fixture
def service_headers():
    return {"Authorization": f"Bearer {make_token(SERVICE_USER_ID, service=True)}"}


@pytest.fixture
def test_scheme(db):
    """A catalogued scheme with no NAV yet."""
    scheme = Scheme(
        scheme_code=119551,
        scheme_name="Aditya Birla Sun Life Banking & PSU Debt Fund - Direct - IDCW",
        fund_house="Aditya Birla Sun Life Mutual Fund",
    )
    db.add(scheme)
    db.commit()
    return scheme


@pytest.fixture
def priced_scheme(db, test_scheme):
    """``test_scheme`` with a latest NAV of 50.0000 on 15-01-2026."""
    db.add(
        LatestNav(
            scheme_code=test_scheme.scheme_code,
            nav=Decimal("50.0000"),
            nav_date=date(2026, 1, 15),
        )
    )
    db.commit()
    return test_scheme


@pytest.fixture
def test_holding(db, priced_scheme):
    """10 units of ``priced_scheme`` held by the test user."""
    holding = Holding(
        user_id=TEST_USER_ID,
        scheme_code=priced_scheme.scheme_code,
        units=Decimal("10"),
    )
    db.add(holding)
    db.commit()
    db.refresh(holding)
    return holding
