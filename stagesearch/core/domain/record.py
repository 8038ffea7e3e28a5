"""Content records and the capabilities they can declare.

Records are owned by the content store. The indexing layer only reads
them: it derives one index document per record and stage, and resolves
search hits back to records by type and id.

A record type opts into optional behaviour by inheriting one of the
capability classes below. The mapper, indexer and materializer check
capabilities with ``isinstance`` and never look for attributes.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar


class Record(ABC):
    """Base class for every indexable content record.

    Attributes:
        type_name: Type discriminator written to the index and used as the
            first segment of the document identifier.
        searchable_fields: Field name to field spec (``type``, ``store``,
            ``format``) for the record's own indexed fields.
        supporting_type: True for types that only enrich another type's
            document and are never indexed on their own.
    """

    type_name: ClassVar[str] = ""
    searchable_fields: ClassVar[dict[str, dict[str, Any]]] = {}
    supporting_type: ClassVar[bool] = False

    id: int
    title: str

    def field_value(self, name: str) -> Any:
        """Value of one searchable field, or None when the record has none."""
        return getattr(self, name, None)

    @classmethod
    def type_ancestry(cls) -> list[str]:
        """Type names from the root record type down to this one."""
        names = []
        for klass in reversed(cls.__mro__):
            if not (isinstance(klass, type) and issubclass(klass, Record)):
                continue
            name = klass.__dict__.get("type_name")
            if name:
                names.append(name)
        return names or ([cls.type_name] if cls.type_name else [])

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type_name}#{getattr(self, 'id', None)}>"


class Hierarchical(ABC):
    """Record lives in a parent/child tree."""

    parent_id: int | None

    @abstractmethod
    def parent(self) -> "Record | None":
        """The parent record, or None at the root."""


class Permissioned(ABC):
    """Record restricts who may view it."""

    @abstractmethod
    def can_view(self, viewer: Any | None) -> bool:
        """Whether ``viewer`` may see this record. None means anonymous."""


class SearchVisible(ABC):
    """Record can opt out of search results."""

    @abstractmethod
    def can_show_in_search(self) -> bool:
        """Whether this record should appear in search results."""


class Versioned(ABC):
    """Record has independently editable draft and live stages."""


class Boostable(ABC):
    """Record carries editor-chosen boost keywords."""

    @abstractmethod
    def boost_terms(self) -> list[str]:
        """Keywords that boost this record when they appear in a query."""


class Categorised(ABC):
    """Record is linked to taxonomy terms."""

    @abstractmethod
    def category_names(self) -> list[str]:
        """Names of the taxonomy terms attached to this record."""


class Tagged(ABC):
    """Record is linked to tags."""

    @abstractmethod
    def tag_titles(self) -> list[str]:
        """Titles of the tags attached to this record."""


class Routable(ABC):
    """Record is tree-structured content with its own URL."""

    @abstractmethod
    def relative_link(self) -> str:
        """Site-relative URL of this record."""
