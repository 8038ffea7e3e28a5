"""Keeps the index in step with record lifecycle events.

Versioned records have a draft document and a live document. Saving a
record rewrites its draft document, publishing rewrites its live document,
and unpublishing removes the live document. Records without independent
stages have a single document visible in both.
"""

import logging
from collections.abc import Callable

from ..domain import IndexDocument, Record, Stage, Versioned
from ..domain.exceptions import RecordIndexingError, StageSearchError
from ..ports import ContentStorePort, DocumentStorePort
from .document_mapper import DocumentMapper

logger = logging.getLogger(__name__)


def _record_key(record: Record) -> tuple[str, int]:
    return (record.type_name, record.id)


class StageAwareIndexer:
    """Writes and removes stage-specific documents for records."""

    def __init__(
        self,
        document_store: DocumentStorePort,
        content_store: ContentStorePort,
        mapper: DocumentMapper,
    ) -> None:
        """Initialize the indexer.

        Args:
            document_store: Index the documents are written to.
            content_store: Source of record types and records.
            mapper: Builds documents and mappings.
        """
        self.document_store = document_store
        self.content_store = content_store
        self.mapper = mapper
        # Records whose next removal must target the live document
        self._live_removals: set[tuple[str, int]] = set()

    def indexable_types(self) -> list[type[Record]]:
        """Registered types that are indexed on their own."""
        return [
            record_type
            for record_type in self.content_store.registered_types().values()
            if not record_type.supporting_type
        ]

    def define_mapping(self) -> None:
        """Push the merged mapping of every registered type to the store."""
        types = list(self.content_store.registered_types().values())
        mapping = self.mapper.build_index_mapping(types)
        self.document_store.define_mapping({name: spec.to_dict() for name, spec in mapping.items()})

    def reindex(self, record: Record, stage: Stage) -> IndexDocument:
        """Build and write the document for one record in one stage.

        Raises:
            RecordIndexingError: The document could not be built or written.
        """
        try:
            document = self.mapper.build_document(record, stage)
            self.document_store.index_documents([document])
        except StageSearchError as e:
            raise RecordIndexingError(
                f"Failed to index {record.type_name}#{record.id}",
                cause=e,
                context={"type": record.type_name, "id": record.id, "stage": stage.value},
            ) from e

        logger.debug(
            "Indexed %s in %s",
            document.doc_id,
            stage.value,
            extra={"doc_id": document.doc_id, "stage": stage.value},
        )
        return document

    def remove(self, record: Record, stage: Stage) -> str:
        """Delete the document for one record in one stage."""
        if isinstance(record, Versioned):
            doc_id = IndexDocument.build_id(record.type_name, record.id, stage)
        else:
            doc_id = IndexDocument.build_id(record.type_name, record.id)
        self.document_store.delete_documents([doc_id])
        logger.debug("Removed %s from the index", doc_id, extra={"doc_id": doc_id})
        return doc_id

    def on_after_write(self, record: Record) -> IndexDocument:
        """A record was saved without publishing."""
        return self.reindex(record, Stage.DRAFT)

    def on_after_publish(self, record: Record) -> IndexDocument:
        return self.reindex(record, Stage.LIVE)

    def on_after_publish_recursive(self, record: Record) -> IndexDocument:
        """The record and everything it owns were published."""
        return self.reindex(record, Stage.LIVE)

    def on_before_unpublish(self, record: Record) -> None:
        """Target the live document with the removal that follows."""
        self._live_removals.add(_record_key(record))

    def on_after_delete(self, record: Record) -> str:
        """A record (or its live version, after unpublishing) was deleted."""
        key = _record_key(record)
        if key in self._live_removals:
            self._live_removals.discard(key)
            return self.remove(record, Stage.LIVE)
        return self.remove(record, Stage.DRAFT)

    def unpublish(
        self,
        record: Record,
        store_unpublish: Callable[[Record], None] | None = None,
    ) -> str:
        """Remove the live document, optionally around the content store's own unpublish.

        The live-removal mark never outlives this call, even when
        ``store_unpublish`` or the removal raises.
        """
        self.on_before_unpublish(record)
        try:
            if store_unpublish is not None:
                store_unpublish(record)
            return self.on_after_delete(record)
        finally:
            self._live_removals.discard(_record_key(record))
