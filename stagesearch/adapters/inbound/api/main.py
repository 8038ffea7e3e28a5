"""FastAPI application for the stagesearch operator API."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .... import __version__
from ....config.logging import setup_logging
from ....config.settings import settings
from ....core.domain.exceptions import StageSearchError
from ...common.exception_handler import (
    format_exception_json,
    get_http_status_code,
    log_exception,
)
from .routers import health, reindex

logger = logging.getLogger(__name__)

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, json_format=settings.log_json)
    logger.info("stagesearch API starting up (index %s)", settings.index_name)
    logger.info("Debug mode: %s", "ENABLED" if DEBUG_MODE else "DISABLED")
    if not settings.has_admin_token:
        logger.warning("ADMIN_TOKEN not set; every reindex request will be refused")
    yield
    logger.info("stagesearch API shutting down...")


app = FastAPI(
    title="stagesearch API",
    description="Operator endpoints for the stage-aware search index.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(reindex.router)


# =============================================================================
# Global Exception Handlers
# =============================================================================


@app.exception_handler(StageSearchError)
async def stagesearch_error_handler(request: Request, exc: StageSearchError) -> JSONResponse:
    """Answer every StageSearchError with its structured form."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=exc.to_dict(include_trace=DEBUG_MODE),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer unhandled exceptions with the same structure."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=error_data,
    )


__all__ = ["app"]
