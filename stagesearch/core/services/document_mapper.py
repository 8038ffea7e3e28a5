"""Derives index mappings and index documents from content records."""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from ..domain import FieldSpec, Hierarchical, IndexDocument, Permissioned, Record, Stage, Versioned
from ..domain.document import (
    CONTENT_FIELD,
    DEFAULT_DATE_FORMAT,
    ID_FIELD,
    ID_SEPARATOR,
    PARENTS_FIELD,
    PUBLIC_VIEW_FIELD,
    STAGE_FIELD,
    TYPE_FIELD,
    TYPE_HIERARCHY_FIELD,
)
from ..domain.exceptions import MissingSchemaError, UnmappableTypeError

logger = logging.getLogger(__name__)

Mapping = dict[str, FieldSpec]
MappingContributor = Callable[[type[Record], Mapping], None]
DocumentContributor = Callable[[Record, "DocumentBuilder"], None]

DEFAULT_MAX_DEPTH = 50


class DocumentBuilder:
    """Mutable field map handed to document contributors."""

    def __init__(self, fields: dict[str, Any] | None = None) -> None:
        self._fields: dict[str, Any] = dict(fields or {})

    def set(self, name: str, value: Any) -> None:
        self._fields[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._fields

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self._fields)


def _type_name(record_type: type[Record]) -> str:
    name = getattr(record_type, "type_name", "")
    if not name or ID_SEPARATOR in name:
        raise UnmappableTypeError(
            f"Record type {record_type.__name__} has no usable type name",
            context={"class": record_type.__name__, "type_name": name},
        )
    return name


class DocumentMapper:
    """Builds field mappings and stage-specific documents.

    Contributors registered with ``register_mapping_contributor`` and
    ``register_document_contributor`` run after the mapper's own fields are
    computed, in registration order.
    """

    def __init__(self, max_hierarchy_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_hierarchy_depth = max_hierarchy_depth
        self._mapping_contributors: list[MappingContributor] = []
        self._document_contributors: list[DocumentContributor] = []

    def register_mapping_contributor(self, contributor: MappingContributor) -> None:
        self._mapping_contributors.append(contributor)

    def register_document_contributor(self, contributor: DocumentContributor) -> None:
        self._document_contributors.append(contributor)

    def build_mapping(self, record_type: type[Record]) -> Mapping:
        """Field mapping for one record type.

        Raises:
            UnmappableTypeError: The type has no usable type name.
        """
        _type_name(record_type)

        mapping: Mapping = {
            name: FieldSpec.from_dict(spec) for name, spec in record_type.searchable_fields.items()
        }

        mapping[ID_FIELD] = FieldSpec("long")
        mapping[TYPE_FIELD] = FieldSpec("keyword")
        mapping[TYPE_HIERARCHY_FIELD] = FieldSpec("keyword", store=True)
        mapping[STAGE_FIELD] = FieldSpec("keyword")
        mapping[PUBLIC_VIEW_FIELD] = FieldSpec("boolean")
        if issubclass(record_type, Hierarchical):
            mapping[PARENTS_FIELD] = FieldSpec("long")

        for spec in mapping.values():
            if spec.type == "date" and spec.format is None:
                spec.format = DEFAULT_DATE_FORMAT

        # Full text is searched, never returned, so don't keep a second copy.
        content = mapping.get(CONTENT_FIELD)
        if content and content.store is None:
            content.store = False

        for contributor in self._mapping_contributors:
            contributor(record_type, mapping)

        return mapping

    def build_index_mapping(self, record_types: Iterable[type[Record]]) -> Mapping:
        """Merge the mappings of several types into one index mapping.

        A field keeps the FieldSpec of the first type that defines it.

        Raises:
            MissingSchemaError: No types were given.
        """
        merged: Mapping = {}
        for record_type in record_types:
            for name, spec in self.build_mapping(record_type).items():
                if name in merged and merged[name] != spec:
                    logger.debug(
                        "Field %s already mapped as %s, ignoring %s from %s",
                        name,
                        merged[name],
                        spec,
                        record_type.type_name,
                    )
                merged.setdefault(name, spec)

        if not merged:
            raise MissingSchemaError("No record types to derive an index mapping from")
        return merged

    def build_document(self, record: Record, stage: Stage) -> IndexDocument:
        """Serialize one record for one stage.

        Versioned records get a stage-specific document. Other records are
        written once with both stage markers and a stage-less identifier.
        """
        record_type = type(record)
        type_name = _type_name(record_type)

        builder = DocumentBuilder()
        for name in record_type.searchable_fields:
            builder.set(name, record.field_value(name))

        if isinstance(record, Versioned):
            stages = [stage.value]
            doc_id = IndexDocument.build_id(type_name, record.id, stage)
        else:
            stages = Stage.all_values()
            doc_id = IndexDocument.build_id(type_name, record.id)

        builder.set(ID_FIELD, record.id)
        builder.set(TYPE_FIELD, type_name)
        builder.set(STAGE_FIELD, stages)
        builder.set(
            PUBLIC_VIEW_FIELD,
            record.can_view(None) if isinstance(record, Permissioned) else True,
        )

        if isinstance(record, Hierarchical):
            builder.set(PARENTS_FIELD, self.parents_hierarchy(record))

        if not builder.has(TYPE_HIERARCHY_FIELD):
            builder.set(TYPE_HIERARCHY_FIELD, record_type.type_ancestry())

        for contributor in self._document_contributors:
            contributor(record, builder)

        return IndexDocument(
            doc_id=doc_id,
            record_type=type_name,
            record_id=record.id,
            stages=stages,
            fields=builder.fields,
        )

    def parents_hierarchy(self, record: Record) -> list[int]:
        """Ids of every ancestor, nearest first.

        Stops at the root, on any cycle (including a record that is its own
        parent) and after ``max_hierarchy_depth`` steps.
        """
        parents: list[int] = []
        seen = {record.id}
        node: Any = record

        while isinstance(node, Hierarchical) and node.parent_id:
            if node.parent_id in seen:
                logger.warning(
                    "Parent cycle detected at %s#%s (parent %s)",
                    record.type_name,
                    node.id,
                    node.parent_id,
                )
                break
            if len(parents) >= self.max_hierarchy_depth:
                logger.warning(
                    "Parent chain of %s#%s exceeds %d levels",
                    record.type_name,
                    record.id,
                    self.max_hierarchy_depth,
                )
                break

            parents.append(int(node.parent_id))
            seen.add(node.parent_id)
            node = node.parent()

        return parents
