"""Exception formatting shared by the CLI and the HTTP API.

Every error leaves the process as the same structured dictionary: type,
error code, message and raise location, with context and a stack trace
when asked for.
"""

import json
import logging
import traceback
from typing import Any

from ...core.domain.exceptions import (
    DocumentStoreError,
    IndexNotFoundError,
    PermissionDeniedError,
    StageSearchError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Format any exception as a structured dictionary.

    ``StageSearchError`` subclasses format themselves; anything else is
    described from its traceback.

    Args:
        exc: The exception to format.
        include_trace: If True, include the full stack trace.
        extra_context: Additional context merged into the ``context`` key.

    Returns:
        Dictionary with ``error``, ``location`` and optional ``context`` and
        ``stack_trace`` keys.
    """
    if isinstance(exc, StageSearchError):
        result = exc.to_dict(include_trace=include_trace)
        if extra_context:
            result.setdefault("context", {}).update(extra_context)
        return result

    tb = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last_frame = tb[-1] if tb else None

    result: dict[str, Any] = {
        "error": {
            "type": type(exc).__name__,
            "code": "PYTHON_ERR",
            "message": str(exc),
        },
        "location": {
            "class": "<unknown>",
            "method": last_frame.name if last_frame else "<unknown>",
            "file": last_frame.filename.split("/")[-1] if last_frame else "<unknown>",
            "line": last_frame.lineno if last_frame else 0,
        },
    }

    if extra_context:
        result["context"] = extra_context

    if include_trace:
        result["stack_trace"] = [
            line.strip()
            for line in traceback.format_exception(type(exc), exc, exc.__traceback__)
            if line.strip()
        ]

    return result


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Log an exception as indented JSON, trace included."""
    log_instance = log or logger
    exc_data = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    log_instance.log(level, json.dumps(exc_data, indent=2, default=str))


# Checked in order, so subclasses come before their families
_HTTP_STATUS_BY_ERROR: list[tuple[type[Exception] | tuple[type[Exception], ...], int]] = [
    (ValidationError, 400),
    (PermissionDeniedError, 403),
    (IndexNotFoundError, 404),
    (DocumentStoreError, 503),
    (StageSearchError, 500),
    (ValueError, 400),
    ((ConnectionError, TimeoutError), 503),
]


def get_http_status_code(exc: Exception) -> int:
    """HTTP status for an exception; 500 unless it maps to something better."""
    for error_type, status in _HTTP_STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500
