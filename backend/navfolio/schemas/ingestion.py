"""Pydantic schemas for NAV ingestion endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from navfolio.services.ingestion.ingestion_types import IngestionSummary, ManualRefreshResult


class SchemeFailureResponse(BaseModel):
    scheme_code: int
    reason: str


class IngestionSummaryResponse(BaseModel):
    """Outcome of one ingestion run."""

    trigger: str
    started_at: datetime
    finished_at: datetime | None = None
    schemes_found: int
    processed: int
    succeeded: int
    failed: int
    history_inserted: int = Field(..., description="New NAV history rows written")
    latest_nav_rows: int
    history_rows: int
    message: str
    failures: list[SchemeFailureResponse] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: IngestionSummary) -> "IngestionSummaryResponse":
        return cls(
            trigger=summary.trigger,
            started_at=summary.started_at,
            finished_at=summary.finished_at,
            schemes_found=summary.schemes_found,
            processed=summary.processed,
            succeeded=summary.succeeded,
            failed=summary.failed,
            history_inserted=summary.history_inserted,
            latest_nav_rows=summary.latest_nav_rows,
            history_rows=summary.history_rows,
            message=summary.message,
            failures=[
                SchemeFailureResponse(scheme_code=f.scheme_code, reason=f.reason)
                for f in summary.failures
            ],
        )


class ManualRefreshResponse(BaseModel):
    """Operator-facing result of a manual trigger."""

    success: bool
    message: str
    processed: int

    @classmethod
    def from_result(cls, result: ManualRefreshResult) -> "ManualRefreshResponse":
        return cls(success=result.success, message=result.message, processed=result.processed)


class IngestionStatusResponse(BaseModel):
    """Scheduler and guard state."""

    scheduler_running: bool
    next_run_at: datetime | None = None
    in_progress: bool
    running_trigger: str | None = None
    running_since: datetime | None = None
    last_run: IngestionSummaryResponse | None = None
