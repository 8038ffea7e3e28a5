"""FastAPI dependencies for stagesearch."""

import hmac

from fastapi import Header

from ....composition.container import get_document_store, get_reindex_task
from ....config.settings import settings

__all__ = ["get_document_store", "get_reindex_task", "is_admin"]


def is_admin(x_admin_token: str | None = Header(default=None)) -> bool:
    """Whether the request carries the configured admin token.

    Always False while no admin token is configured.
    """
    if not settings.has_admin_token or not x_admin_token:
        return False
    return hmac.compare_digest(x_admin_token.strip(), settings.admin_token)
