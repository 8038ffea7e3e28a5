"""Domain models for stagesearch.

- record: Record base class and capability interfaces
- stage: Stage enum
- document: FieldSpec, IndexDocument, DocumentId and index field names
- search: SearchQuery, SearchResponse, SearchContext
- results: ResultItem, PaginatedList, FacetEntry and aggregation models

All models are re-exported here:

    from stagesearch.core.domain import Record, Stage, IndexDocument
"""

from .document import DocumentId, FieldSpec, IndexDocument
from .record import (
    Boostable,
    Categorised,
    Hierarchical,
    Permissioned,
    Record,
    Routable,
    SearchVisible,
    Tagged,
    Versioned,
)
from .results import (
    ActiveAggregation,
    AggregateGroup,
    AggregationBucket,
    FacetEntry,
    PaginatedList,
    RawRecord,
    ResultItem,
)
from .search import FacetBlock, RawHit, SearchContext, SearchQuery, SearchResponse
from .stage import Stage

__all__ = [
    # Records
    "Record",
    "Hierarchical",
    "Permissioned",
    "SearchVisible",
    "Versioned",
    "Boostable",
    "Categorised",
    "Tagged",
    "Routable",
    "Stage",
    # Documents
    "FieldSpec",
    "IndexDocument",
    "DocumentId",
    # Search
    "SearchQuery",
    "RawHit",
    "FacetBlock",
    "SearchResponse",
    "SearchContext",
    # Results
    "RawRecord",
    "ResultItem",
    "PaginatedList",
    "FacetEntry",
    "AggregationBucket",
    "AggregateGroup",
    "ActiveAggregation",
]
