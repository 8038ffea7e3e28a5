"""Input validation exceptions for stagesearch."""

from .base import StageSearchError


class ValidationError(StageSearchError):
    """Input validation failed."""

    error_code = "SS_VAL_001"


class MalformedIdentifierError(ValidationError):
    """A document identifier does not split into type, id and stage."""

    error_code = "SS_VAL_002"


class InvalidReferenceError(ValidationError):
    """A removal reference is not of the form ``id,type``."""

    error_code = "SS_VAL_003"
