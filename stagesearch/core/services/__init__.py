"""Indexing and search services."""

from .contributors import register_discovery
from .document_mapper import DocumentBuilder, DocumentMapper
from .facets import FacetEngine
from .indexer import StageAwareIndexer
from .materializer import ResultMaterializer, ResultSet
from .query_builder import QueryBuilder, SearchPageConfig
from .reindex_task import ReindexOptions, ReindexReport, ReindexTask
from .search_service import SearchService

__all__ = [
    "DocumentBuilder",
    "DocumentMapper",
    "FacetEngine",
    "QueryBuilder",
    "ReindexOptions",
    "ReindexReport",
    "ReindexTask",
    "ResultMaterializer",
    "ResultSet",
    "SearchPageConfig",
    "SearchService",
    "StageAwareIndexer",
    "register_discovery",
]
