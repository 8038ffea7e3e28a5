"""Elasticsearch document store.

Translates ``SearchQuery`` into a search request body and the raw response
back into a ``SearchResponse``. Facet counts are computed with
aggregations: one terms aggregation per facet field (``facet__<field>``)
and one keyed filters aggregation for all query facets (``facet_queries``).
Grouped previews use a terms aggregation named after the field with a
``top_facet_docs`` top-hits sub-aggregation.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from elasticsearch import Elasticsearch

from ...core.domain import FacetBlock, IndexDocument, RawHit, SearchQuery, SearchResponse
from ...core.domain.document import STAGE_FIELD, TYPE_HIERARCHY_FIELD
from ...core.domain.exceptions import (
    IndexNotFoundError,
    StoreConnectionError,
    StoreQueryError,
)
from ...core.ports.document_store_port import DocumentStorePort
from ...core.services.facets import TOP_HITS_AGGREGATION

logger = logging.getLogger(__name__)

FACET_FIELD_PREFIX = "facet__"
FACET_QUERIES_AGGREGATION = "facet_queries"


def _unquote(value: str) -> tuple[str, bool]:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1], True
    return value, False


def build_search_body(query: SearchQuery) -> dict[str, Any]:
    """Request body for one ``SearchQuery``."""
    must: list[dict[str, Any]] = []
    filters: list[dict[str, Any]] = []
    should: list[dict[str, Any]] = []

    if query.text:
        match: dict[str, Any] = {"query": query.text}
        if query.search_fields:
            match["fields"] = [f"{field}^{boost}" for field, boost in query.search_fields.items()]
        if query.fuzziness:
            match["fuzziness"] = query.fuzziness
        must.append({"multi_match": match})
    else:
        must.append({"match_all": {}})

    if query.stage is not None:
        filters.append({"term": {STAGE_FIELD: query.stage.value}})

    if query.types:
        filters.append({"terms": {TYPE_HIERARCHY_FIELD: list(query.types)}})

    for field, value in query.must_match.items():
        filters.append({"term": {field: value}})

    for field, values in query.filters.items():
        options = []
        for value in values:
            text, exact = _unquote(value)
            if exact:
                options.append({"match_phrase": {field: text}})
            else:
                options.append({"match": {field: text}})
        filters.append({"bool": {"should": options, "minimum_should_match": 1}})

    for clause, boost in query.boost_matches.items():
        field, sep, value = clause.partition(":")
        if sep and value:
            should.append({"match": {field: {"query": value, "boost": boost}}})

    bool_query: dict[str, Any] = {"must": must, "filter": filters}
    if should:
        bool_query["should"] = should

    body: dict[str, Any] = {
        "query": {"bool": bool_query},
        "from": query.start,
        "size": query.limit,
    }

    if query.sort:
        body["sort"] = [{field: {"order": direction}} for field, direction in query.sort.items()]

    aggs: dict[str, Any] = {}
    for field in query.facet_fields:
        aggs[f"{FACET_FIELD_PREFIX}{field}"] = {
            "terms": {
                "field": field,
                "size": query.max_facet_results,
                "min_doc_count": query.min_facet_count,
            }
        }
    if query.facet_queries:
        aggs[FACET_QUERIES_AGGREGATION] = {
            "filters": {
                "filters": {fq: {"query_string": {"query": fq}} for fq in query.facet_queries}
            }
        }
    for field, preview_size in query.aggregations.items():
        aggs[field] = {
            "terms": {"field": field, "size": query.max_facet_results},
            "aggs": {TOP_HITS_AGGREGATION: {"top_hits": {"size": preview_size}}},
        }
    if aggs:
        body["aggs"] = aggs

    return body


def _bucket_key(bucket: dict[str, Any]) -> str:
    return str(bucket.get("key_as_string", bucket.get("key")))


def _parse_facets(body: dict[str, Any], query: SearchQuery) -> FacetBlock | None:
    if not query.wants_facets:
        return None

    aggregations = body.get("aggregations")
    if aggregations is None:
        failures = body.get("_shards", {}).get("failures") or []
        reason = "; ".join(
            str(failure.get("reason", {}).get("reason", failure)) for failure in failures
        )
        return FacetBlock(exception=reason or "aggregations missing from response")

    fields = {}
    for field in query.facet_fields:
        buckets = aggregations.get(f"{FACET_FIELD_PREFIX}{field}", {}).get("buckets", [])
        fields[field] = {_bucket_key(bucket): int(bucket.get("doc_count", 0)) for bucket in buckets}

    queries = {}
    keyed = aggregations.get(FACET_QUERIES_AGGREGATION, {}).get("buckets", {})
    for name, bucket in keyed.items():
        queries[name] = int(bucket.get("doc_count", 0))

    return FacetBlock(fields=fields, queries=queries)


def parse_search_response(body: dict[str, Any], status: int, query: SearchQuery) -> SearchResponse:
    """``SearchResponse`` for a raw response body."""
    hits_block = body.get("hits", {})
    total = hits_block.get("total", 0)
    if isinstance(total, dict):
        total = total.get("value", 0)

    hits = tuple(
        RawHit(id=str(hit.get("_id", "")), score=hit.get("_score"), source=hit.get("_source") or {})
        for hit in hits_block.get("hits", [])
    )

    aggregations = body.get("aggregations") or {}
    return SearchResponse(
        status=status,
        hits=hits,
        total=int(total),
        start=query.start,
        took=body.get("took"),
        facets=_parse_facets(body, query),
        aggregations={name: aggregations[name] for name in query.aggregations if name in aggregations},
    )


class ElasticsearchAdapter(DocumentStorePort):
    """Elasticsearch-backed index for stage-aware documents."""

    def __init__(
        self,
        url: str,
        index_name: str,
        api_key: str = "",
        request_timeout: int = 30,
        refresh: bool = False,
    ) -> None:
        """Initialize the adapter.

        Args:
            url: Cluster URL.
            index_name: Index holding every record type.
            api_key: Optional API key.
            request_timeout: Seconds before a request is abandoned.
            refresh: Wait for writes to become searchable before returning.
        """
        self.url = url
        self.index_name = index_name
        self.api_key = api_key
        self.request_timeout = request_timeout
        self.refresh = refresh
        self._client: "Elasticsearch | None" = None

    def _get_client(self) -> "Elasticsearch":
        """Get or create the Elasticsearch client."""
        if not self._client:
            try:
                from elasticsearch import Elasticsearch

                self._client = Elasticsearch(
                    self.url,
                    api_key=self.api_key or None,
                    request_timeout=self.request_timeout,
                )
                logger.info("Connected to Elasticsearch at: %s", self.url)
            except Exception as e:
                raise StoreConnectionError(
                    f"Failed to connect to Elasticsearch at {self.url}",
                    cause=e,
                    context={"url": self.url},
                ) from e
        return self._client

    def _call(self, operation: str, fn, **kwargs: Any) -> Any:
        from elasticsearch import ApiError, NotFoundError
        from elasticsearch import ConnectionError as ESConnectionError

        try:
            return fn(**kwargs)
        except NotFoundError as e:
            raise IndexNotFoundError(
                f"Index {self.index_name} not found",
                cause=e,
                context={"index": self.index_name, "operation": operation},
            ) from e
        except ESConnectionError as e:
            raise StoreConnectionError(
                f"Elasticsearch unreachable during {operation}",
                cause=e,
                context={"url": self.url, "operation": operation},
            ) from e
        except ApiError as e:
            raise StoreQueryError(
                f"Elasticsearch rejected {operation}",
                cause=e,
                context={"index": self.index_name, "operation": operation},
            ) from e

    def index_exists(self) -> bool:
        client = self._get_client()
        return bool(self._call("index_exists", client.indices.exists, index=self.index_name))

    def delete_index(self) -> None:
        client = self._get_client()
        self._call("delete_index", client.indices.delete, index=self.index_name)
        logger.info("Deleted index %s", self.index_name)

    def define_mapping(self, mapping: dict[str, dict[str, Any]]) -> None:
        client = self._get_client()
        if self.index_exists():
            self._call(
                "put_mapping", client.indices.put_mapping, index=self.index_name, properties=mapping
            )
        else:
            self._call(
                "create_index",
                client.indices.create,
                index=self.index_name,
                mappings={"properties": mapping},
            )
        logger.info("Defined mapping for %s (%d fields)", self.index_name, len(mapping))

    def index_documents(self, documents: list[IndexDocument]) -> int:
        if not documents:
            return 0

        operations: list[dict[str, Any]] = []
        for document in documents:
            operations.append({"index": {"_index": self.index_name, "_id": document.doc_id}})
            operations.append(document.to_source())

        result = self._bulk("index_documents", operations)
        errors = [item["index"]["error"] for item in result.get("items", []) if item.get("index", {}).get("error")]
        if errors:
            raise StoreQueryError(
                f"{len(errors)} of {len(documents)} documents were rejected",
                context={"index": self.index_name, "first_error": errors[0]},
            )

        logger.debug("Indexed %d documents into %s", len(documents), self.index_name)
        return len(documents)

    def delete_documents(self, ids: list[str]) -> int:
        if not ids:
            return 0

        operations = [{"delete": {"_index": self.index_name, "_id": doc_id}} for doc_id in ids]
        result = self._bulk("delete_documents", operations)
        deleted = sum(
            1 for item in result.get("items", []) if item.get("delete", {}).get("result") == "deleted"
        )
        logger.info("Deleted %d of %d documents from %s", deleted, len(ids), self.index_name)
        return deleted

    def _bulk(self, operation: str, operations: list[dict[str, Any]]) -> dict[str, Any]:
        client = self._get_client()
        response = self._call(
            operation,
            client.bulk,
            operations=operations,
            refresh="wait_for" if self.refresh else False,
        )
        return dict(response.body) if hasattr(response, "body") else dict(response)

    def search(self, query: SearchQuery) -> SearchResponse:
        client = self._get_client()
        body = build_search_body(query)

        kwargs: dict[str, Any] = {
            "index": self.index_name,
            "query": body["query"],
            "from_": body["from"],
            "size": body["size"],
        }
        if "sort" in body:
            kwargs["sort"] = body["sort"]
        if "aggs" in body:
            kwargs["aggs"] = body["aggs"]

        response = self._call("search", client.search, **kwargs)
        status = response.meta.status if hasattr(response, "meta") else 200
        raw = dict(response.body) if hasattr(response, "body") else dict(response)
        return parse_search_response(raw, status, query)
