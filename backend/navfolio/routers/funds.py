"""Funds API router - scheme catalogue and NAV data."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from navfolio.database import get_db
from navfolio.dependencies.auth import Principal, get_current_user_id, require_service_account
from navfolio.dependencies.services import (
    get_catalogue_client,
    get_nav_client,
    get_nav_history_service,
)
from navfolio.models import Scheme
from navfolio.schemas.funds import CatalogueSyncResponse, NavHistoryResponse, NavUpdateResponse
from navfolio.services.catalogue.scheme_catalogue_service import SchemeCatalogueService
from navfolio.services.ingestion.runner import build_ingestion_service
from navfolio.services.market_data.mfapi_client import MfApiClient, UpstreamFetchError
from navfolio.services.portfolio.nav_history_service import NavHistoryService
from navfolio.services.repositories.exceptions import NotFoundError
from navfolio.services.repositories.scheme_repository import SchemeRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/funds", tags=["funds"])


def _get_scheme_or_404(db: Session, scheme_code: int) -> Scheme:
    if scheme_code <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid scheme code is required",
        )
    try:
        return SchemeRepository(db).get_by_code(scheme_code)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fund not found") from e


@router.post("/sync", response_model=CatalogueSyncResponse)
def sync_catalogue(
    _: Principal = Depends(require_service_account),
    db: Session = Depends(get_db),
    client: MfApiClient = Depends(get_catalogue_client),
) -> CatalogueSyncResponse:
    """Load the full scheme catalogue from mfapi.in.

    Schemes already in the catalogue are counted as duplicates and left alone.
    """
    try:
        result = SchemeCatalogueService(db, client).sync()
    except UpstreamFetchError as e:
        logger.error("Scheme catalogue sync failed: %s", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    return CatalogueSyncResponse.from_result(result)


@router.get("/{scheme_code}/nav", response_model=NavHistoryResponse)
def get_nav_history(
    scheme_code: int,
    _: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    history_service: NavHistoryService = Depends(get_nav_history_service),
) -> NavHistoryResponse:
    """Recent NAV history of a scheme, newest first.

    History missing from the store is fetched once from mfapi.in; if that
    fails the response carries an empty history.
    """
    scheme = _get_scheme_or_404(db, scheme_code)
    history = history_service.get_history(scheme_code)
    return NavHistoryResponse.build(scheme, history_service.get_latest(scheme_code), history)


@router.post("/{scheme_code}/update-nav", response_model=NavUpdateResponse)
def update_scheme_nav(
    scheme_code: int,
    _: Principal = Depends(require_service_account),
    db: Session = Depends(get_db),
    client: MfApiClient = Depends(get_nav_client),
) -> NavUpdateResponse:
    """Fetch and store the latest NAV of one scheme."""
    _get_scheme_or_404(db, scheme_code)
    try:
        quote = build_ingestion_service(db, client).refresh_scheme(scheme_code)
    except UpstreamFetchError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"NAV data not available for this fund: {e}",
        ) from e
    return NavUpdateResponse.from_quote(quote)
