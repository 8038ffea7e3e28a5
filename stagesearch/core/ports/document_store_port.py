"""Document Store Port Interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import IndexDocument, SearchQuery, SearchResponse


class DocumentStorePort(ABC):
    """Abstract interface for the search index.

    Every call is an independent round trip. Implementations own timeouts
    and retries.
    """

    @abstractmethod
    def search(self, query: SearchQuery) -> SearchResponse:
        """Run a query and return the raw response."""
        ...

    @abstractmethod
    def define_mapping(self, mapping: dict[str, dict[str, Any]]) -> None:
        """Create the index if needed and apply the field mapping."""
        ...

    @abstractmethod
    def delete_index(self) -> None:
        """Delete the whole index.

        Raises:
            IndexNotFoundError: The index does not exist.
        """
        ...

    @abstractmethod
    def index_exists(self) -> bool:
        """Whether the index exists."""
        ...

    @abstractmethod
    def index_documents(self, documents: list[IndexDocument]) -> int:
        """Write (replace) documents. Returns the number written."""
        ...

    @abstractmethod
    def delete_documents(self, ids: list[str]) -> int:
        """Delete documents by identifier. Returns the number deleted."""
        ...
