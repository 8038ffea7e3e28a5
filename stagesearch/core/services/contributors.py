"""Taxonomy and boosting fields contributed to every document.

Registers the fields editors use to steer discovery: boost keywords,
taxonomy categories, tags and, for tree-structured content, the canonical
relative URL.
"""

from ..domain import Boostable, Categorised, FieldSpec, Record, Routable, Tagged
from ..domain.document import (
    BOOST_TERMS_FIELD,
    BOOSTED_KEYWORDS_FIELD,
    CATEGORIES_FIELD,
    KEYWORDS_FIELD,
    TAGS_FIELD,
    URL_FIELD,
)
from .document_mapper import DocumentBuilder, DocumentMapper, Mapping


def discovery_mappings(record_type: type[Record], mapping: Mapping) -> None:
    """Add mappings for fields that are later boosted or faceted on."""
    mapping[BOOST_TERMS_FIELD] = FieldSpec("text")
    mapping[BOOSTED_KEYWORDS_FIELD] = FieldSpec("keyword")

    mapping[CATEGORIES_FIELD] = FieldSpec("keyword")
    mapping[KEYWORDS_FIELD] = FieldSpec("text")
    mapping[TAGS_FIELD] = FieldSpec("keyword")

    if issubclass(record_type, Routable):
        mapping[URL_FIELD] = FieldSpec("keyword")


def discovery_document(record: Record, document: DocumentBuilder) -> None:
    """Fill boost, taxonomy and URL fields from the record."""
    if isinstance(record, Boostable):
        terms = list(record.boost_terms())
        document.set(BOOST_TERMS_FIELD, terms)
        document.set(BOOSTED_KEYWORDS_FIELD, terms)

    if isinstance(record, Categorised):
        categories = list(record.category_names())
        current = document.get(CATEGORIES_FIELD) or []
        document.set(CATEGORIES_FIELD, list(current) + categories)
        document.set(KEYWORDS_FIELD, " ".join(categories))

    if isinstance(record, Tagged):
        current = document.get(TAGS_FIELD) or []
        document.set(TAGS_FIELD, list(current) + list(record.tag_titles()))

    if isinstance(record, Routable):
        document.set(URL_FIELD, record.relative_link())


def register_discovery(mapper: DocumentMapper) -> DocumentMapper:
    mapper.register_mapping_contributor(discovery_mappings)
    mapper.register_document_contributor(discovery_document)
    return mapper
