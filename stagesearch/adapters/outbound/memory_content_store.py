"""In-process content store.

Holds a draft and a live copy of every record in dictionaries. It backs
the test suite and local development, and is the default content store
when no ``CONTENT_STORE_FACTORY`` is configured.
"""

import copy
import logging
from collections.abc import Iterator

from ...core.domain import Record, Stage, Versioned
from ...core.domain.exceptions import InvalidConfigurationError
from ...core.ports.content_store_port import ContentStorePort

logger = logging.getLogger(__name__)

_Key = tuple[str, int]


class InMemoryContentStore(ContentStorePort):
    """Two-stage record store kept in memory.

    ``save`` writes the draft copy; ``publish`` copies the draft to live.
    Records reached through the live stage are snapshots taken at publish
    time, so later draft edits do not leak into live reads.

    Records that are not ``Versioned`` have a single copy that every stage
    reads, the same way the indexer writes one stage-less document for them.
    """

    def __init__(self, stage: Stage = Stage.LIVE) -> None:
        self._types: dict[str, type[Record]] = {}
        self._records: dict[Stage, dict[_Key, Record]] = {Stage.DRAFT: {}, Stage.LIVE: {}}
        self._stage = stage

    def register(self, *record_types: type[Record]) -> None:
        for record_type in record_types:
            if not record_type.type_name:
                raise InvalidConfigurationError(
                    f"{record_type.__name__} has no type_name",
                    context={"class": record_type.__name__},
                )
            self._types[record_type.type_name] = record_type

    def use_stage(self, stage: Stage) -> None:
        """Change the stage reads default to."""
        self._stage = stage

    def save(self, record: Record) -> Record:
        self._ensure_registered(record)
        self._records[Stage.DRAFT][self._key(record)] = record
        return record

    def publish(self, record: Record) -> Record:
        """Save ``record`` and copy it to the live stage."""
        self.save(record)
        if not isinstance(record, Versioned):
            return record
        self._records[Stage.LIVE][self._key(record)] = copy.copy(record)
        return record

    def unpublish(self, record: Record) -> None:
        """Drop the live copy of a versioned record."""
        self._records[Stage.LIVE].pop(self._key(record), None)

    def delete(self, record: Record) -> None:
        """Remove every copy of ``record``."""
        for records in self._records.values():
            records.pop(self._key(record), None)

    def get_by_type_and_id(self, type_name: str, record_id: int, stage: Stage) -> Record | None:
        return self._records[self._read_stage(type_name, stage)].get((type_name, record_id))

    def list_by_type(self, type_name: str, stage: Stage) -> Iterator[Record]:
        records = self._records[self._read_stage(type_name, stage)]
        for (name, _), record in sorted(records.items(), key=lambda item: item[0]):
            if name == type_name:
                yield record

    def current_stage(self) -> Stage:
        return self._stage

    def registered_types(self) -> dict[str, type[Record]]:
        return dict(self._types)

    def _ensure_registered(self, record: Record) -> None:
        if record.type_name not in self._types:
            self.register(type(record))

    def _read_stage(self, type_name: str, stage: Stage) -> Stage:
        record_type = self._types.get(type_name)
        if record_type is not None and not issubclass(record_type, Versioned):
            return Stage.DRAFT
        return stage

    @staticmethod
    def _key(record: Record) -> _Key:
        return (record.type_name, record.id)
