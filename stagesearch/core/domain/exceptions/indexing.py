"""Indexing exceptions for stagesearch."""

from .base import StageSearchError


class IndexingError(StageSearchError):
    """Error while writing records into the index."""

    error_code = "SS_IDX_001"


class RecordIndexingError(IndexingError):
    """A single record could not be indexed."""

    error_code = "SS_IDX_002"


class BatchIndexingError(IndexingError):
    """A bulk reindex stopped before processing every record."""

    error_code = "SS_IDX_003"
