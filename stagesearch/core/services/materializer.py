"""Turns raw search responses into resolved, paginated records.

Each hit id is parsed back into a record type, id and stage, then the
record is loaded from the content store. Hits from the wrong stage or of
unknown types are dropped. Hits whose record no longer exists are deleted
from the index on the spot, so the index heals itself as it is read.
"""

import logging
from functools import cached_property
from typing import TYPE_CHECKING

from ..domain import (
    DocumentId,
    FacetEntry,
    PaginatedList,
    Permissioned,
    RawHit,
    RawRecord,
    Record,
    ResultItem,
    SearchContext,
    SearchQuery,
    SearchResponse,
    SearchVisible,
    Stage,
)
from ..domain.document import ID_SEPARATOR, RAW_ID_PREFIX
from ..domain.exceptions import DocumentStoreError, MalformedIdentifierError
from ..ports import ContentStorePort, DocumentStorePort

if TYPE_CHECKING:
    from .facets import FacetEngine

logger = logging.getLogger(__name__)


class ResultMaterializer:
    """Resolves hits against the content store."""

    def __init__(self, content_store: ContentStorePort, document_store: DocumentStorePort) -> None:
        self.content_store = content_store
        self.document_store = document_store

    def active_stage(self, context: SearchContext) -> Stage:
        return context.stage or self.content_store.current_stage()

    def materialize(
        self,
        query: SearchQuery,
        response: SearchResponse,
        context: SearchContext,
        facet_engine: "FacetEngine | None" = None,
    ) -> "ResultSet":
        """Wrap a response in a lazily resolved result set."""
        return ResultSet(query, response, context, self, facet_engine)

    def resolve_hit(self, hit: RawHit, context: SearchContext) -> ResultItem | None:
        """Resolve one hit to a result item, or None if it must be skipped."""
        active = self.active_stage(context)

        try:
            doc_id = DocumentId.parse(hit.id)
        except MalformedIdentifierError:
            logger.warning("Invalid document ID %s", hit.id)
            return None

        if doc_id.is_raw:
            return ResultItem(record=self._inflate_raw(hit, context.expand_raw), score=hit.score)

        record_type = self.content_store.get_type(doc_id.record_type)
        if record_type is None:
            logger.debug("Skipping %s: unknown type %s", hit.id, doc_id.record_type)
            return None

        stage = doc_id.stage or active
        if stage != active:
            logger.debug("Skipping %s: not in stage %s", hit.id, active.value)
            return None

        try:
            record_id = int(doc_id.record_id)
        except ValueError:
            logger.warning("Invalid document ID %s", hit.id)
            return None

        record = self.content_store.get_by_type_and_id(doc_id.record_type, record_id, active)
        if record is None:
            logger.warning(
                "Object %s is no longer in the system, removing from index",
                hit.id,
                extra={"doc_id": hit.id, "stage": active.value},
            )
            self._remove_stale(hit.id)
            return None

        if context.evaluate_permissions and isinstance(record, Permissioned):
            if not record.can_view(context.viewer):
                return None

        if isinstance(record, SearchVisible) and not record.can_show_in_search():
            return None

        return ResultItem(record=record, score=hit.score)

    def resolve_hits(self, hits: list[RawHit], context: SearchContext) -> list[ResultItem]:
        items = []
        for hit in hits:
            item = self.resolve_hit(hit, context)
            if item is not None:
                items.append(item)
        return items

    def _inflate_raw(self, hit: RawHit, expand: bool) -> RawRecord:
        key = hit.id[len(RAW_ID_PREFIX) :].lstrip(ID_SEPARATOR)
        return RawRecord(id=hit.id, key=key, fields=dict(hit.source) if expand else {})

    def _remove_stale(self, doc_id: str) -> None:
        try:
            self.document_store.delete_documents([doc_id])
        except DocumentStoreError as e:
            logger.warning("Could not remove stale document %s: %s", doc_id, e)


class ResultSet:
    """Read-only view over one search response.

    Records and facets are computed on first access and cached for the life
    of the result set.
    """

    def __init__(
        self,
        query: SearchQuery,
        response: SearchResponse,
        context: SearchContext,
        materializer: ResultMaterializer,
        facet_engine: "FacetEngine | None" = None,
    ) -> None:
        self.query = query
        self.response = response
        self.context = context
        self._materializer = materializer
        self._facet_engine = facet_engine

    @cached_property
    def items(self) -> PaginatedList[ResultItem]:
        if not self.response.ok:
            return PaginatedList.empty(self.query.limit)

        resolved = self._materializer.resolve_hits(list(self.response.hits), self.context)
        return PaginatedList(
            resolved,
            page_length=self.query.limit,
            page_start=self.response.start,
            total_items=self.response.total,
        )

    @property
    def records(self) -> list[Record | RawRecord]:
        return [item.record for item in self.items]

    @cached_property
    def facets(self) -> dict[str, list[FacetEntry]] | None:
        if self._facet_engine is None or not self.response.ok:
            return None
        return self._facet_engine.get_facets(self.response)

    @property
    def total_results(self) -> int | None:
        return self.response.total if self.response.ok else None

    @property
    def time_taken(self) -> int | None:
        """Elapsed time as reported by the store (milliseconds)."""
        return self.response.took if self.response.ok else None

    @property
    def elapsed_seconds(self) -> float | None:
        took = self.time_taken
        return took / 1000 if took is not None else None

    def __len__(self) -> int:
        return len(self.items)
