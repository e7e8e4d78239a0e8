"""Wiring for ingestion runs that own their database session and HTTP client."""

import logging

from sqlalchemy.orm import Session

from navfolio.constants import IngestionTrigger
from navfolio.database import SessionLocal
from navfolio.services.ingestion.ingestion_types import IngestionSummary
from navfolio.services.ingestion.nav_ingestion_service import NavIngestionService
from navfolio.services.market_data.mfapi_client import MfApiClient
from navfolio.services.repositories import HoldingRepository, NavRepository

logger = logging.getLogger(__name__)


def build_ingestion_service(db: Session, client: MfApiClient) -> NavIngestionService:
    """Ingestion service backed by the SQLAlchemy repositories."""
    return NavIngestionService(NavRepository(db), HoldingRepository(db), client)


def run_scheduled_refresh() -> IngestionSummary:
    """Run one full NAV refresh cycle with a fresh session and client.

    Raises:
        IngestionInProgressError: If another run is in flight
        SchemeListError: If the held scheme list cannot be read
    """
    logger.info("Starting daily NAV update...")
    db = SessionLocal()
    try:
        with MfApiClient() as client:
            return build_ingestion_service(db, client).run_cycle(IngestionTrigger.SCHEDULED)
    finally:
        db.close()
