"""Health check endpoints."""

from fastapi import APIRouter, Depends

from ..... import __version__
from .....core.ports import DocumentStorePort
from ..deps import get_document_store
from ..models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic liveness check; does not touch the document store."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        document_store="not_checked",
    )


@router.get("/ready", response_model=HealthResponse)
def readiness_check(
    document_store: DocumentStorePort = Depends(get_document_store),
) -> HealthResponse:
    """Readiness probe.

    Reports whether the document store is reachable and the index exists.
    """
    try:
        store_status = "connected" if document_store.index_exists() else "connected (no index)"
    except Exception as e:
        store_status = f"error: {e}"

    return HealthResponse(
        status="ready",
        version=__version__,
        document_store=store_status,
    )
