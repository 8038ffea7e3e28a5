"""Document store exceptions for stagesearch."""

from .base import StageSearchError


class DocumentStoreError(StageSearchError):
    """Base error for document store operations."""

    error_code = "SS_STO_001"


class StoreConnectionError(DocumentStoreError):
    """Failed to connect to the search cluster.

    Common causes:
    - Invalid URL or API key
    - Network connectivity issues
    - Cluster is down or still starting
    """

    error_code = "SS_STO_002"


class StoreQueryError(DocumentStoreError):
    """The search cluster rejected a request.

    Common causes:
    - Malformed query or aggregation
    - Field mapping conflicts
    """

    error_code = "SS_STO_003"


class IndexNotFoundError(DocumentStoreError):
    """The configured index does not exist."""

    error_code = "SS_STO_004"
