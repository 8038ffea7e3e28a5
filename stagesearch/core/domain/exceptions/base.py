"""Base exception for the indexing and search layers.

``StageSearchError`` records where it was raised and what it was working
on, so an operator reading a reindex log or an API error body can tell
which record, stage or index was involved without a debugger.
"""

import inspect
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import FrameType
from typing import Any


@dataclass(frozen=True)
class ErrorLocation:
    """Class, method, file and line of a raise site."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def from_frame(cls, frame: FrameType | None) -> "ErrorLocation":
        if frame is None:
            return cls("<unknown>", "<unknown>", "<unknown>", 0)
        owner = frame.f_locals.get("self")
        return cls(
            class_name=type(owner).__name__ if owner is not None else "<module>",
            method_name=frame.f_code.co_name,
            file_name=frame.f_code.co_filename.replace("\\", "/").rsplit("/", 1)[-1],
            line_number=frame.f_lineno,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "method": self.method_name,
            "file": self.file_name,
            "line": self.line_number,
            "timestamp": self.timestamp,
        }


class StageSearchError(Exception):
    """Base exception for all stagesearch errors.

    Example:
        try:
            client.indices.delete(index=name)
        except NotFoundError as e:
            raise IndexNotFoundError(
                "Index does not exist",
                cause=e,
                context={"index": name},
            ) from e
    """

    error_code: str = "SS_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            message: Human-readable error message.
            cause: The store or library error being wrapped.
            context: Record type, id, stage, index name and the like.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = dict(context or {})
        self.location = ErrorLocation.from_frame(self._raise_site())
        self.stack_trace = (
            "".join(traceback.format_exception(cause)) if cause is not None else None
        )

    def _raise_site(self) -> FrameType | None:
        # Skip every frame that belongs to constructing this instance,
        # including __init__ overrides in subclasses
        frame = inspect.currentframe()
        while frame is not None and frame.f_locals.get("self") is self:
            frame = frame.f_back
        return frame

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Structured form used by log lines, CLI errors and API bodies.

        A wrapped ``StageSearchError`` keeps its own code and context under
        ``cause``, so a batch failure still shows which record broke it.

        Args:
            include_trace: Add the cause's stack trace (debug mode).
        """
        result: dict[str, Any] = {
            "error": {
                "type": type(self).__name__,
                "code": self.error_code,
                "message": self.message,
            },
            "location": self.location.to_dict(),
        }

        if self.extra_context:
            result["context"] = dict(self.extra_context)

        if include_trace and self.stack_trace:
            result["stack_trace"] = [line for line in self.stack_trace.split("\n") if line.strip()]

        if self.cause is not None:
            cause: dict[str, Any] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
            if isinstance(self.cause, StageSearchError):
                cause["code"] = self.cause.error_code
                if self.cause.extra_context:
                    cause["context"] = dict(self.cause.extra_context)
            result["cause"] = cause

        return result
