"""Logging setup for the CLI and the API.

Both surfaces log under the ``stagesearch`` logger. In JSON mode every
line is one object, and the index fields passed through ``extra=``
(``doc_id``, ``record_type``, ``record_id``, ``stage``) are lifted into a
``document`` key so reindex runs can be filtered per record.
"""

import json
import logging
import sys
from typing import Any

from ..core.domain.exceptions import StageSearchError

ROOT_LOGGER = "stagesearch"

DOCUMENT_FIELDS = ("doc_id", "record_type", "record_id", "stage")

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per record, with document fields and error codes."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        document = {name: getattr(record, name) for name in DOCUMENT_FIELDS if hasattr(record, name)}
        if document:
            log_entry["document"] = document

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            if isinstance(exc, StageSearchError):
                log_entry["exception"] = exc.to_dict(include_trace=True)
            else:
                log_entry["exception"] = {
                    "type": type(exc).__name__,
                    "message": str(exc),
                    "traceback": self.formatException(record.exc_info),
                }

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """Configure the ``stagesearch`` logger.

    Progress lines from the reindex task go to stdout through the CLI, so
    log output is kept on stderr.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        json_format: If True, output logs in JSON format.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JSONExceptionFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
