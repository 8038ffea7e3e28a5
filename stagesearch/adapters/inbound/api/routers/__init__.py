"""API routers."""

from . import health, reindex

__all__ = ["health", "reindex"]
