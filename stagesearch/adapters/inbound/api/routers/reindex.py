"""Reindex endpoint."""

import logging

from fastapi import APIRouter, Depends

from .....core.services import ReindexOptions, ReindexTask
from ..deps import get_reindex_task, is_admin
from ..models import ReindexRequest, ReindexResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["indexing"])


@router.post("/reindex", response_model=ReindexResponse)
def run_reindex(
    request: ReindexRequest,
    privileged: bool = Depends(is_admin),
    task: ReindexTask = Depends(get_reindex_task),
) -> ReindexResponse:
    """Run the reindex task and return its progress log.

    Requires the ``X-Admin-Token`` header; without it the task refuses to
    run and the global handler answers 403.
    """
    options = ReindexOptions(
        rebuild=request.rebuild,
        reindex=request.reindex,
        remove=request.remove,
        confirm=request.confirm,
    )
    report = task.run(options, privileged=privileged)
    logger.info("Reindex finished: %d indexed, %d failed", report.indexed, len(report.failures))

    return ReindexResponse(
        lines=report.lines,
        indexed=report.indexed,
        failures=report.failures,
        matched=report.matched,
        removed=report.removed,
        error=report.error,
        error_code=report.abort.error_code if report.abort else None,
    )
