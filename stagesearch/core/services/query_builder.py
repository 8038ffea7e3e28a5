"""Builds store queries from search page settings and request parameters."""

from pydantic import BaseModel, Field

from ..domain import SearchContext, SearchQuery, Stage
from . import query_params


class SearchPageConfig(BaseModel):
    """Editor-controlled settings of one search page.

    Attributes:
        search_types: Only return records of these types (any ancestor).
        search_fields: Field name to boost for the free-text match.
        boost_matches: ``"field:value"`` to boost when a hit matches it.
        fuzziness: 0 for exact spelling, up to 2 edits otherwise.
        facet_fields: Field name to display label for field facets.
        facet_queries: ``"field:query"`` to display label for query facets.
        min_facet_count: Minimum hits for a facet value to be listed.
        max_facet_results: Maximum values listed per facet field.
        aggregation_fields: Fields to group preview results by.
        expanded_result_count: Preview hits per aggregation bucket.
        default_filters: Filters applied when the request selects none.
        results_per_page: Page length.
        sort_by: Sort field; relevance when unset.
        sort_direction: ``asc`` or ``desc``.
    """

    search_types: list[str] = Field(default_factory=list)
    search_fields: dict[str, int] = Field(default_factory=lambda: {"title": 2, "content": 1})
    boost_matches: dict[str, int] = Field(default_factory=dict)
    fuzziness: int = Field(default=0, ge=0, le=2)
    facet_fields: dict[str, str] = Field(default_factory=dict)
    facet_queries: dict[str, str] = Field(default_factory=dict)
    min_facet_count: int = Field(default=1, ge=0)
    max_facet_results: int = Field(default=20, ge=1)
    aggregation_fields: list[str] = Field(default_factory=list)
    expanded_result_count: int = Field(default=5, ge=1)
    default_filters: dict[str, str] = Field(default_factory=dict)
    results_per_page: int = Field(default=10, ge=1)
    sort_by: str | None = None
    sort_direction: str = "desc"

    def facet_labels(self) -> dict[str, str]:
        """Display labels for both field facets and query facets."""
        labels = {field: label for field, label in self.facet_fields.items() if label}
        labels.update({query: label for query, label in self.facet_queries.items() if label})
        return labels


class QueryBuilder:
    """Combines page settings with the filters active in the request."""

    def build(
        self,
        config: SearchPageConfig,
        text: str | None,
        context: SearchContext,
        stage: Stage,
        start: int = 0,
    ) -> SearchQuery:
        params = query_params.parse_query_string(context.query_string)

        filters = query_params.active_filters(params)
        if not filters and config.default_filters:
            filters = {field: [value] for field, value in config.default_filters.items()}

        # A selected aggregation narrows results to that exact bucket
        for field, values in query_params.active_aggregations(params).items():
            filters.setdefault(field, []).extend(query_params.quoted(v) for v in values)

        sort = {}
        if config.sort_by:
            sort[config.sort_by] = config.sort_direction.lower()

        return SearchQuery(
            text=text.strip() if text and text.strip() else None,
            search_fields=dict(config.search_fields),
            fuzziness=config.fuzziness,
            types=list(config.search_types),
            stage=stage,
            filters=filters,
            boost_matches=dict(config.boost_matches),
            sort=sort,
            start=max(0, start),
            limit=config.results_per_page,
            facet_fields=list(config.facet_fields),
            facet_queries=list(config.facet_queries),
            min_facet_count=config.min_facet_count,
            max_facet_results=config.max_facet_results,
            aggregations={field: config.expanded_result_count for field in config.aggregation_fields},
        )
