"""Search request and raw response models."""

from dataclasses import dataclass, field
from typing import Any

from .stage import Stage


@dataclass
class SearchQuery:
    """A store-agnostic search request.

    Attributes:
        text: Free text to match, or None to match everything.
        search_fields: Field name to boost for the free-text match.
        fuzziness: Allowed edit distance for the free-text match.
        types: Restrict to records whose type ancestry contains one of these.
        stage: Restrict to documents visible in this stage.
        filters: Field name to accepted values; a value wrapped in double
            quotes is matched as an exact phrase.
        boost_matches: ``"field:value"`` to boost applied when it matches.
        must_match: Field name to value that every hit must equal exactly.
        sort: Field name to direction.
        start: Offset of the first hit.
        limit: Page length.
        facet_fields: Fields to count values for.
        facet_queries: ``"field:query"`` expressions to count hits for.
        min_facet_count: Drop facet values with fewer hits.
        max_facet_results: Maximum values per facet field.
        aggregations: Field name to number of preview hits per bucket.
    """

    text: str | None = None
    search_fields: dict[str, int] = field(default_factory=dict)
    fuzziness: int = 0
    types: list[str] = field(default_factory=list)
    stage: Stage | None = None
    filters: dict[str, list[str]] = field(default_factory=dict)
    boost_matches: dict[str, int] = field(default_factory=dict)
    must_match: dict[str, Any] = field(default_factory=dict)
    sort: dict[str, str] = field(default_factory=dict)
    start: int = 0
    limit: int = 10
    facet_fields: list[str] = field(default_factory=list)
    facet_queries: list[str] = field(default_factory=list)
    min_facet_count: int = 1
    max_facet_results: int = 20
    aggregations: dict[str, int] = field(default_factory=dict)

    @property
    def wants_facets(self) -> bool:
        return bool(self.facet_fields or self.facet_queries)


@dataclass(frozen=True)
class RawHit:
    """One hit as returned by the document store."""

    id: str
    score: float | None = None
    source: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FacetBlock:
    """Per-field value counts and per-query counts for one search.

    Attributes:
        fields: Field name to ``{value: count}`` in store order.
        queries: ``"field:query"`` to count in store order.
        exception: Set when the store failed to compute facets.
    """

    fields: dict[str, dict[str, int]] = field(default_factory=dict)
    queries: dict[str, int] = field(default_factory=dict)
    exception: str | None = None


@dataclass(frozen=True)
class SearchResponse:
    """Raw result of one query. Immutable once received.

    Attributes:
        status: HTTP-like status of the search call.
        hits: Hits in relevance order.
        total: Total documents found by the store.
        start: Offset of the first hit.
        took: Elapsed time in the store's native unit (milliseconds).
        facets: Facet counts, when facets were requested.
        aggregations: Raw aggregation block keyed by aggregation name.
    """

    status: int
    hits: tuple[RawHit, ...] = ()
    total: int = 0
    start: int = 0
    took: int | None = None
    facets: FacetBlock | None = None
    aggregations: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def aggregation(self, name: str) -> dict[str, Any] | None:
        return self.aggregations.get(name)


@dataclass
class SearchContext:
    """Request-scoped state for one search.

    Attributes:
        stage: Stage the caller is browsing. None falls back to the content
            store's current stage.
        viewer: Opaque viewer handed to permission checks.
        evaluate_permissions: Drop records the viewer may not see.
        expand_raw: Include source fields when inflating raw documents.
        query_string: The raw query string of the incoming request.
        base_link: Link that generated facet/aggregation links point at.
    """

    stage: Stage | None = None
    viewer: Any | None = None
    evaluate_permissions: bool = False
    expand_raw: bool = True
    query_string: str = ""
    base_link: str = ""
