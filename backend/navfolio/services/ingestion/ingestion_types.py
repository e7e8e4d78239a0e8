"""Value objects for NAV ingestion runs."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SchemeFailure:
    """A scheme that could not be refreshed in a run."""

    scheme_code: int
    reason: str


@dataclass
class IngestionSummary:
    """Outcome of one ingestion run."""

    trigger: str
    started_at: datetime
    finished_at: datetime | None = None
    schemes_found: int = 0
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    history_inserted: int = 0
    latest_nav_rows: int = 0
    history_rows: int = 0
    failures: list[SchemeFailure] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"{self.succeeded} successful, {self.failed} failed"


@dataclass
class ManualRefreshResult:
    """Result handed back to the operator for a manual trigger."""

    success: bool
    message: str
    processed: int
    summary: IngestionSummary | None = None
