"""Index document models and composite document identifiers."""

from dataclasses import dataclass, field
from typing import Any

from .exceptions import MalformedIdentifierError
from .stage import Stage

# Index field names
ID_FIELD = "id"
TYPE_FIELD = "class_name"
TYPE_HIERARCHY_FIELD = "class_name_hierarchy"
STAGE_FIELD = "stage"
PUBLIC_VIEW_FIELD = "public_view"
PARENTS_FIELD = "parents_hierarchy"
CONTENT_FIELD = "content"
BOOST_TERMS_FIELD = "boost_terms"
BOOSTED_KEYWORDS_FIELD = "boosted_keywords"
CATEGORIES_FIELD = "categories"
KEYWORDS_FIELD = "keywords"
TAGS_FIELD = "tags"
URL_FIELD = "url"

ID_SEPARATOR = "_"

# Documents whose id starts with this marker are denormalized documents with
# no backing record (``@raw_<key>``).
RAW_ID_PREFIX = "@raw"

DEFAULT_DATE_FORMAT = "date_optional_time"


@dataclass
class FieldSpec:
    """Mapping for one index field."""

    type: str
    store: bool | None = None
    format: str | None = None

    @classmethod
    def from_dict(cls, spec: dict[str, Any]) -> "FieldSpec":
        return cls(type=spec.get("type", "text"), store=spec.get("store"), format=spec.get("format"))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type}
        if self.store is not None:
            result["store"] = self.store
        if self.format is not None:
            result["format"] = self.format
        return result


@dataclass
class IndexDocument:
    """The serialized form of one record for one stage.

    Attributes:
        doc_id: Composite identifier, ``{type}_{id}_{stage}`` or
            ``{type}_{id}`` for records indexed in both stages at once.
        record_type: Type discriminator of the source record.
        record_id: Identifier of the source record.
        stages: Stage marker values this document is visible in.
        fields: Field name to scalar or list value.
    """

    doc_id: str
    record_type: str
    record_id: int
    stages: list[str]
    fields: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def build_id(record_type: str, record_id: int, stage: Stage | None = None) -> str:
        parts = [record_type, str(record_id)]
        if stage is not None:
            parts.append(stage.value)
        return ID_SEPARATOR.join(parts)

    def to_source(self) -> dict[str, Any]:
        """Body sent to the document store."""
        return dict(self.fields)


@dataclass(frozen=True)
class DocumentId:
    """A parsed composite document identifier."""

    record_type: str
    record_id: str
    stage: Stage | None = None

    @property
    def is_raw(self) -> bool:
        return self.record_type.startswith(RAW_ID_PREFIX)

    @classmethod
    def parse(cls, raw_id: str) -> "DocumentId":
        """Split ``{type}_{id}`` or ``{type}_{id}_{stage}``.

        Raises:
            MalformedIdentifierError: Wrong segment count, empty type or id,
                or an unknown stage segment.
        """
        bits = str(raw_id).split(ID_SEPARATOR)
        if len(bits) == 3:
            record_type, record_id, stage_value = bits
            stage: Stage | None
            try:
                stage = Stage(stage_value)
            except ValueError as e:
                raise MalformedIdentifierError(
                    f"Invalid document ID {raw_id}", cause=e, context={"id": raw_id}
                ) from e
        elif len(bits) == 2:
            record_type, record_id = bits
            stage = None
        else:
            raise MalformedIdentifierError(f"Invalid document ID {raw_id}", context={"id": raw_id})

        if not record_type or not record_id:
            raise MalformedIdentifierError(f"Invalid document ID {raw_id}", context={"id": raw_id})

        return cls(record_type=record_type, record_id=record_id, stage=stage)
