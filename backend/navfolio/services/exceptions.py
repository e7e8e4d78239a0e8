"""Service-level exceptions shared by routers and background jobs."""


class ValidationError(ValueError):
    """Input rejected before any store mutation."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class IngestionInProgressError(RuntimeError):
    """Another NAV ingestion run holds the ingestion guard."""

    def __init__(self, running_trigger: str | None):
        self.running_trigger = running_trigger
        super().__init__(f"NAV ingestion already in progress (started by {running_trigger or 'unknown'})")
