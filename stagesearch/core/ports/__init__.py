"""Ports (interfaces) for external collaborators."""

from .content_store_port import ContentStorePort
from .document_store_port import DocumentStorePort

__all__ = ["ContentStorePort", "DocumentStorePort"]
