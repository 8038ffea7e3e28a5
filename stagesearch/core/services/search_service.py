"""Runs a search page query end to end."""

import logging
from dataclasses import replace

from ..domain import SearchContext, SearchResponse
from ..domain.exceptions import DocumentStoreError
from ..ports import DocumentStorePort
from .facets import FacetEngine
from .materializer import ResultMaterializer, ResultSet
from .query_builder import QueryBuilder, SearchPageConfig

logger = logging.getLogger(__name__)


class SearchService:
    """Builds the query, runs it and wraps the response."""

    def __init__(
        self,
        document_store: DocumentStorePort,
        materializer: ResultMaterializer,
        facet_engine: FacetEngine,
        query_builder: QueryBuilder | None = None,
    ) -> None:
        self.document_store = document_store
        self.materializer = materializer
        self.facet_engine = facet_engine
        self.query_builder = query_builder or QueryBuilder()

    def search(
        self,
        config: SearchPageConfig,
        text: str | None,
        context: SearchContext,
        start: int = 0,
    ) -> ResultSet:
        """Search and return a lazily materialised result set.

        A store failure is logged and yields an empty result set rather than
        an error; end users see fewer results, never a crash.
        """
        stage = self.materializer.active_stage(context)
        context = replace(context, stage=stage)
        query = self.query_builder.build(config, text, context, stage, start)

        try:
            response = self.document_store.search(query)
        except DocumentStoreError as e:
            logger.error("Search failed: %s", e)
            response = SearchResponse(status=503)

        return self.materializer.materialize(query, response, context, self.facet_engine)
