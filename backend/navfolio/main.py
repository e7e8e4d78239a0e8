"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from navfolio import __version__
from navfolio.config import settings
from navfolio.schemas.common import ErrorDetail, ErrorResponse
from navfolio.services.ingestion.runner import run_scheduled_refresh
from navfolio.services.ingestion.scheduler import NavRefreshScheduler

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the daily NAV scheduler and stop it on shutdown."""
    scheduler = None
    if settings.nav_scheduler_enabled:
        scheduler = NavRefreshScheduler(run_scheduled_refresh)
        await scheduler.start()
    else:
        logger.info("In-process NAV scheduler disabled")
    app.state.nav_scheduler = scheduler

    yield

    if scheduler is not None:
        await scheduler.stop()
    app.state.nav_scheduler = None


# Create FastAPI app
app = FastAPI(
    title="Navfolio API",
    description="Mutual fund portfolio tracking with daily NAV updates",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with one detail per offending field."""
    details = [
        ErrorDetail(
            field=".".join(str(part) for part in error["loc"] if part != "body") or None,
            message=error["msg"],
        )
        for error in exc.errors()
    ]
    body = ErrorResponse(
        error="ValidationError",
        message="Invalid input data",
        details=details,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(mode="json")
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = ErrorResponse(error="InternalError", message="Internal server error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump(mode="json")
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Navfolio API", "version": __version__, "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include routers
from navfolio.routers import funds, ingestion, portfolio  # noqa: E402

app.include_router(portfolio.router)
app.include_router(funds.router)
app.include_router(ingestion.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
