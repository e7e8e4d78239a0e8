"""NAV ingestion API router - operator and Airflow triggers.

All endpoints require a service account. Runs share the process-wide
ingestion guard with the in-process scheduler, so a trigger that arrives
while another run is in flight gets a 409.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from navfolio.constants import IngestionTrigger
from navfolio.dependencies.auth import Principal, require_service_account
from navfolio.dependencies.services import get_ingestion_service
from navfolio.schemas.ingestion import (
    IngestionStatusResponse,
    IngestionSummaryResponse,
    ManualRefreshResponse,
)
from navfolio.services.exceptions import IngestionInProgressError
from navfolio.services.ingestion.guard import ingestion_guard
from navfolio.services.ingestion.nav_ingestion_service import NavIngestionService
from navfolio.services.repositories.exceptions import SchemeListError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ingestion", tags=["ingestion"])


@router.post("/nav/manual", response_model=ManualRefreshResponse)
def trigger_manual_refresh(
    _: Principal = Depends(require_service_account),
    ingestion_service: NavIngestionService = Depends(get_ingestion_service),
) -> ManualRefreshResponse:
    """Refresh the first few held schemes right away."""
    try:
        result = ingestion_service.run_manual()
    except IngestionInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except SchemeListError as e:
        logger.exception("Manual NAV update failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Manual update failed: could not read held schemes",
        ) from e
    return ManualRefreshResponse.from_result(result)


@router.post("/nav/run", response_model=IngestionSummaryResponse)
def run_full_refresh(
    _: Principal = Depends(require_service_account),
    ingestion_service: NavIngestionService = Depends(get_ingestion_service),
) -> IngestionSummaryResponse:
    """Run a full NAV refresh cycle over every held scheme.

    Used by the Airflow DAG when the in-process scheduler is disabled.
    """
    try:
        summary = ingestion_service.run_cycle(IngestionTrigger.API)
    except IngestionInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except SchemeListError as e:
        logger.exception("Daily NAV update failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="NAV update failed: could not read held schemes",
        ) from e
    return IngestionSummaryResponse.from_summary(summary)


@router.get("/nav/status", response_model=IngestionStatusResponse)
def ingestion_status(
    request: Request,
    _: Principal = Depends(require_service_account),
) -> IngestionStatusResponse:
    """Scheduler state, the run in flight (if any) and the last finished run."""
    scheduler = getattr(request.app.state, "nav_scheduler", None)
    last = ingestion_guard.last_summary
    return IngestionStatusResponse(
        scheduler_running=scheduler is not None and scheduler.is_running,
        next_run_at=scheduler.next_run_at if scheduler is not None else None,
        in_progress=ingestion_guard.in_progress,
        running_trigger=ingestion_guard.holder,
        running_since=ingestion_guard.acquired_at,
        last_run=IngestionSummaryResponse.from_summary(last) if last else None,
    )
