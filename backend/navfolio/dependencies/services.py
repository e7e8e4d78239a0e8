"""Service providers for route handlers.

Overridable through ``app.dependency_overrides`` so tests can swap the NAV
source for a fake.
"""

from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from navfolio.config import settings
from navfolio.database import get_db
from navfolio.services.ingestion.nav_ingestion_service import NavIngestionService
from navfolio.services.ingestion.runner import build_ingestion_service
from navfolio.services.market_data.mfapi_client import MfApiClient
from navfolio.services.portfolio.nav_history_service import NavHistoryService
from navfolio.services.portfolio.valuation_service import PortfolioValuationService


def get_nav_client() -> Generator[MfApiClient, None, None]:
    """mfapi.in client for the duration of one request."""
    with MfApiClient() as client:
        yield client


def get_nav_history_service(
    db: Session = Depends(get_db),
    client: MfApiClient = Depends(get_nav_client),
) -> NavHistoryService:
    return NavHistoryService(db, client)


def get_valuation_service(
    db: Session = Depends(get_db),
    client: MfApiClient = Depends(get_nav_client),
) -> PortfolioValuationService:
    history_service = NavHistoryService(db, client) if settings.valuation_fetch_missing_nav else None
    return PortfolioValuationService(db, history_service=history_service)


def get_catalogue_client() -> Generator[MfApiClient, None, None]:
    """mfapi.in client for catalogue syncs, which retry transient failures."""
    with MfApiClient(max_retries=settings.catalogue_fetch_retries) as client:
        yield client


def get_ingestion_service(
    db: Session = Depends(get_db),
    client: MfApiClient = Depends(get_nav_client),
) -> NavIngestionService:
    return build_ingestion_service(db, client)
