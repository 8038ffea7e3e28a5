"""Presentation-ready result models built from raw search responses."""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, TypeVar

from .record import Record

T = TypeVar("T")

FIELD_FACET = "field"
QUERY_FACET = "query"


@dataclass
class RawRecord:
    """A denormalized document with no backing record.

    Attributes:
        id: The full document identifier.
        key: Identifier with the raw marker stripped.
        fields: Source fields, empty unless expansion was requested.
    """

    id: str
    key: str
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return str(self.fields.get("title", self.key))


@dataclass
class ResultItem:
    """A resolved record together with its relevance score."""

    record: Record | RawRecord
    score: float | None = None

    @property
    def title(self) -> str:
        return getattr(self.record, "title", "")


class PaginatedList(Generic[T]):
    """One page of results plus the figures needed to page through the rest.

    ``total_items`` is the store's count, not the number of items that
    survived filtering on this page.
    """

    def __init__(
        self,
        items: list[T],
        page_length: int,
        page_start: int = 0,
        total_items: int = 0,
    ) -> None:
        self.items = items
        self.page_length = page_length
        self.page_start = page_start
        self.total_items = total_items

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]

    @property
    def current_page(self) -> int:
        if not self.page_length:
            return 1
        return self.page_start // self.page_length + 1

    @property
    def total_pages(self) -> int:
        if not self.page_length:
            return 1
        return max(1, math.ceil(self.total_items / self.page_length))

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page_start > 0

    @classmethod
    def empty(cls, page_length: int = 0) -> "PaginatedList[T]":
        return cls([], page_length=page_length)


@dataclass
class FacetEntry:
    """One facet value or query facet.

    Attributes:
        name: Value (field facets) or ``"field:query"`` (query facets).
        query: Filter fragment that reproduces this facet.
        count: Number of matching documents.
        kind: ``"field"`` or ``"query"``.
        label: Display label; defaults to ``name``.
        search_link: Link applying this facet as a filter.
        quoted_search_link: Link applying this facet as an exact phrase filter.
    """

    name: str
    query: str
    count: int
    kind: str = FIELD_FACET
    label: str | None = None
    search_link: str | None = None
    quoted_search_link: str | None = None

    @property
    def is_query_facet(self) -> bool:
        return self.kind == QUERY_FACET

    @property
    def display_name(self) -> str:
        return self.label or self.name


@dataclass
class AggregationBucket:
    """One bucket of a terms aggregation with its preview hits."""

    key: str
    doc_count: int
    hits: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class AggregateGroup:
    """A grouped result preview ready for rendering."""

    title: str
    doc_count: int
    children: list[ResultItem]
    link: str


@dataclass
class ActiveAggregation:
    """An aggregation selection currently applied to the search."""

    key: str
    label: str
    link: str
