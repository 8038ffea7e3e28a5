"""Access control exceptions for stagesearch."""

from .base import StageSearchError


class PermissionDeniedError(StageSearchError):
    """The caller lacks the capability required for an operation."""

    error_code = "SS_ACC_001"
