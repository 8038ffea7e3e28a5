"""Operator task that rebuilds, refreshes or prunes the search index.

The task prints one progress line per type, record and action. It never
rolls back: documents written before a failure stay written, and running
the task again rewrites them with the same identifiers.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..domain import SearchQuery, Stage
from ..domain.document import ID_FIELD, TYPE_HIERARCHY_FIELD
from ..domain.exceptions import (
    BatchIndexingError,
    IndexNotFoundError,
    InvalidReferenceError,
    PermissionDeniedError,
)
from .indexer import StageAwareIndexer

logger = logging.getLogger(__name__)

Emitter = Callable[[str], None]

USAGE = "Specify 'rebuild' to delete the index first, and 'reindex' to re-index content items"

# Upper bound on documents inspected by a single removal
REMOVE_MATCH_LIMIT = 100

STAGE_LABELS = {Stage.DRAFT: "Draft", Stage.LIVE: "Live"}


@dataclass
class ReindexOptions:
    """Flags accepted by the reindex task.

    Attributes:
        rebuild: Delete the index and redefine its mapping first.
        reindex: Rewrite every record of every indexable type in both stages.
        remove: ``"id,type"`` reference of documents to remove.
        confirm: Actually delete what ``remove`` matched.
    """

    rebuild: bool = False
    reindex: bool = False
    remove: str | None = None
    confirm: bool = False


@dataclass
class ReindexReport:
    """What a run did.

    Attributes:
        abort: Set when the bulk reindex stopped before every record was
            visited. Its context names the type and stage it stopped in.
    """

    lines: list[str] = field(default_factory=list)
    indexed: int = 0
    failures: list[str] = field(default_factory=list)
    matched: list[str] = field(default_factory=list)
    removed: int = 0
    abort: BatchIndexingError | None = None

    @property
    def error(self) -> str | None:
        return self.abort.message if self.abort else None

    @property
    def succeeded(self) -> bool:
        return self.abort is None


def parse_reference(reference: str) -> tuple[str, str]:
    """Split an ``id,type`` removal reference.

    Raises:
        InvalidReferenceError: The reference lacks an id or a type.
    """
    bits = [bit.strip() for bit in reference.split(",")]
    if len(bits) != 2 or not bits[0] or not bits[1]:
        raise InvalidReferenceError(
            "Missing ID and Type for deleting from the index",
            context={"reference": reference},
        )
    return bits[0], bits[1]


class ReindexTask:
    """Rebuild, reindex and remove actions over the whole record set."""

    def __init__(self, indexer: StageAwareIndexer) -> None:
        self.indexer = indexer
        self.document_store = indexer.document_store
        self.content_store = indexer.content_store

    def run(
        self,
        options: ReindexOptions,
        privileged: bool,
        emit: Emitter | None = None,
    ) -> ReindexReport:
        """Run the requested actions in order: rebuild, reindex, remove.

        Args:
            options: Which actions to run.
            privileged: Whether the caller holds the admin capability.
            emit: Receives each progress line as it is produced.

        Raises:
            PermissionDeniedError: The caller is not privileged.
        """
        if not privileged:
            raise PermissionDeniedError("Reindexing requires administrator access")

        report = ReindexReport()

        def message(line: str) -> None:
            report.lines.append(line)
            logger.info(line)
            if emit:
                emit(line)

        message(USAGE)

        if options.rebuild:
            try:
                self.document_store.delete_index()
            except IndexNotFoundError:
                message("Index not found to be rebuilt")

        if options.rebuild or not self.document_store.index_exists():
            message("Defining the mappings (if not already)")
            self.indexer.define_mapping()

        if options.reindex:
            try:
                self._reindex_all(report, message)
            except BatchIndexingError as e:
                report.abort = e
                logger.error("Bulk reindex aborted: %s", e.to_dict())
                message(f"Some failures detected when indexing {e.message}")

        if options.remove:
            self._remove(options.remove, options.confirm, report, message)

        return report

    def _reindex_all(self, report: ReindexReport, message: Emitter) -> None:
        message("Refreshing the index")
        position: dict[str, str] = {}
        try:
            for record_type in self.content_store.registered_types().values():
                if record_type.supporting_type:
                    message(f"Skip type supporting_type: {record_type.type_name}")
                    continue

                message(f"Type: {record_type.type_name}")
                position["type"] = record_type.type_name
                for stage in (Stage.DRAFT, Stage.LIVE):
                    position["stage"] = stage.value
                    self._reindex_stage(record_type.type_name, stage, report, message)
        except Exception as e:
            raise BatchIndexingError(
                str(e),
                cause=e,
                context={**position, "indexed": report.indexed},
            ) from e

    def _reindex_stage(
        self,
        type_name: str,
        stage: Stage,
        report: ReindexReport,
        message: Emitter,
    ) -> None:
        label = STAGE_LABELS[stage]
        for record in self.content_store.list_by_type(type_name, stage):
            message(f"Indexing {label} record #{record.id}/{record.title}")
            try:
                self.indexer.reindex(record, stage)
                report.indexed += 1
            except Exception as e:
                report.failures.append(f"{type_name}#{record.id}")
                logger.warning(
                    "Failed to index %s#%s in %s: %s",
                    type_name,
                    record.id,
                    label,
                    e,
                    extra={"record_type": type_name, "record_id": record.id, "stage": stage.value},
                )
                message(f"Failed to index {label} record #{record.id}: {e}")

    def _remove(self, reference: str, confirm: bool, report: ReindexReport, message: Emitter) -> None:
        try:
            record_id, type_name = parse_reference(reference)
        except InvalidReferenceError as e:
            message(e.message)
            return

        query = SearchQuery(
            must_match={
                ID_FIELD: int(record_id) if record_id.isdigit() else record_id,
                TYPE_HIERARCHY_FIELD: type_name,
            },
            limit=REMOVE_MATCH_LIMIT,
        )
        response = self.document_store.search(query)

        for hit in response.hits:
            if hit.id:
                message(f"Removing {hit.id}")
                report.matched.append(hit.id)

        message(f"Found {len(report.matched)} matching documents")

        if not report.matched:
            return

        if confirm:
            report.removed = self.document_store.delete_documents(list(report.matched))
            message(f"Deleted {report.removed} documents")
        else:
            message("Add 'confirm' to delete the documents listed above")
