"""Facet counts, aggregation buckets and the links that apply them.

Three shapes come back from the store: per-field value counts, counts for
``field:query`` expressions, and terms aggregations carrying preview hits.
All of them are normalised here into ``FacetEntry`` and ``AggregateGroup``
so link generation does not care where a value came from.

Merge order: for each field, field-facet entries come first in the order
the store returned them, followed by query-facet entries in store order.
"""

import logging
from dataclasses import replace
from typing import Any

from ..domain import (
    ActiveAggregation,
    AggregateGroup,
    AggregationBucket,
    FacetEntry,
    RawHit,
    SearchContext,
    SearchResponse,
)
from ..domain.results import FIELD_FACET, QUERY_FACET
from . import query_params
from .materializer import ResultMaterializer

logger = logging.getLogger(__name__)

EMPTY_BUCKET = "_empty_"

# Sub-aggregation holding the preview hits of each bucket
TOP_HITS_AGGREGATION = "top_facet_docs"

Facets = dict[str, list[FacetEntry]]


def parse_buckets(aggregation: dict[str, Any] | None) -> list[AggregationBucket]:
    """Buckets of a terms aggregation, skipping empty keys and empty previews."""
    buckets: list[AggregationBucket] = []
    if not aggregation:
        return buckets

    for bucket in aggregation.get("buckets", []):
        key = bucket.get("key")
        if key is None or not str(key):
            continue

        hits = bucket.get(TOP_HITS_AGGREGATION, {}).get("hits", {}).get("hits", [])
        if not hits:
            continue

        buckets.append(
            AggregationBucket(key=str(key), doc_count=int(bucket.get("doc_count", 0)), hits=hits)
        )
    return buckets


class FacetEngine:
    """Builds facet maps and aggregation groups from a search response."""

    def __init__(self, materializer: ResultMaterializer) -> None:
        self.materializer = materializer

    def get_facets(self, response: SearchResponse) -> Facets | None:
        """Field name to facet entries.

        Returns None when the response has no facet block and an empty map
        when the store reported a facet failure.
        """
        block = response.facets
        if block is None:
            return None

        if block.exception:
            logger.error("Facet computation failed: %s", block.exception)
            return {}

        facets: Facets = {}
        for field, values in block.fields.items():
            entries = []
            for value, count in values.items():
                if value == EMPTY_BUCKET:
                    continue
                entries.append(FacetEntry(name=value, query=value, count=count, kind=FIELD_FACET))
            facets[field] = entries

        for name, count in block.queries.items():
            if name == EMPTY_BUCKET:
                continue
            field, sep, query = name.partition(":")
            if not sep:
                logger.warning("Query facet %r has no field prefix", name)
                continue
            facets.setdefault(field, []).append(
                FacetEntry(name=name, query=query, count=count, kind=QUERY_FACET)
            )

        return facets

    def current_facets(
        self,
        facets: Facets | None,
        context: SearchContext,
        labels: dict[str, str] | None = None,
        term: str | None = None,
    ) -> list[FacetEntry]:
        """Copies of the facet entries with display labels and filter links attached.

        Args:
            facets: Output of ``get_facets``.
            context: Supplies the active query string and base link.
            labels: Display label overrides, keyed by facet name (query
                facets use their ``field:query`` name).
            term: Only return entries for this field.
        """
        if not facets:
            return []

        labels = labels or {}
        fields = [term] if term else list(facets)
        result = []
        for field in fields:
            for entry in facets.get(field, []):
                search_link = query_params.link(
                    context.base_link,
                    query_params.with_filter(context.query_string, field, entry.query),
                )
                quoted_search_link = query_params.link(
                    context.base_link,
                    query_params.with_filter(
                        context.query_string, field, query_params.quoted(entry.query)
                    ),
                )
                result.append(
                    replace(
                        entry,
                        label=labels.get(entry.name, entry.label),
                        search_link=search_link,
                        quoted_search_link=quoted_search_link,
                    )
                )
        return result

    def is_search_filtered(self, context: SearchContext) -> bool:
        params = query_params.parse_query_string(context.query_string)
        return bool(query_params.active_aggregations(params))

    def aggregated_results(
        self,
        response: SearchResponse,
        field: str,
        context: SearchContext,
    ) -> list[AggregateGroup] | None:
        """One preview group per bucket of the ``field`` aggregation.

        Returns None when an aggregation is already selected (the page shows
        the filtered result list instead) or the response has no such
        aggregation.
        """
        if self.is_search_filtered(context):
            return None
        if not response.ok:
            return None

        aggregation = response.aggregation(field)
        if aggregation is None:
            return None

        groups = []
        for bucket in parse_buckets(aggregation):
            hits = [
                RawHit(
                    id=str(hit.get("_id", "")),
                    score=hit.get("_score"),
                    source=hit.get("_source") or {},
                )
                for hit in bucket.hits
            ]
            children = self.materializer.resolve_hits(hits, context)

            query_string = query_params.with_aggregation(
                query_params.without(context.query_string, "url"), field, bucket.key
            )
            groups.append(
                AggregateGroup(
                    title=bucket.key,
                    doc_count=bucket.doc_count,
                    children=children,
                    link=query_params.link(context.base_link, query_string),
                )
            )
        return groups

    def aggregation_filters(
        self,
        context: SearchContext,
        labels: dict[str, str] | None = None,
    ) -> list[ActiveAggregation]:
        """The aggregation selections in effect, each with a link clearing it."""
        params = query_params.parse_query_string(context.query_string)
        selections = query_params.active_aggregations(params)
        if not selections:
            return []

        labels = labels or {}
        clear_link = query_params.link(
            context.base_link,
            query_params.without(context.query_string, "url", query_params.AGGREGATION_PARAM),
        )
        return [
            ActiveAggregation(key=", ".join(values), label=labels.get(field, field), link=clear_link)
            for field, values in selections.items()
        ]
