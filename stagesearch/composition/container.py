"""Composition root wiring adapters to the indexing and search services."""

from __future__ import annotations

import importlib
import logging
from functools import lru_cache

from ..adapters.outbound.elasticsearch_adapter import ElasticsearchAdapter
from ..adapters.outbound.memory_content_store import InMemoryContentStore
from ..config import settings
from ..core.domain import Stage
from ..core.domain.exceptions import InvalidConfigurationError
from ..core.ports import ContentStorePort, DocumentStorePort
from ..core.services import (
    DocumentMapper,
    FacetEngine,
    ReindexTask,
    ResultMaterializer,
    SearchService,
    StageAwareIndexer,
    register_discovery,
)

logger = logging.getLogger(__name__)


def load_content_store(path: str) -> ContentStorePort:
    """Build the content store named by a ``module:callable`` path.

    Raises:
        InvalidConfigurationError: The path cannot be imported or the
            callable does not return a ``ContentStorePort``.
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise InvalidConfigurationError(
            "CONTENT_STORE_FACTORY must look like 'package.module:callable'",
            context={"content_store_factory": path},
        )

    try:
        factory = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as e:
        raise InvalidConfigurationError(
            f"Cannot load content store factory {path}",
            cause=e,
            context={"content_store_factory": path},
        ) from e

    store = factory()
    if not isinstance(store, ContentStorePort):
        raise InvalidConfigurationError(
            f"{path} returned {type(store).__name__}, not a content store",
            context={"content_store_factory": path},
        )
    return store


@lru_cache
def get_document_store() -> DocumentStorePort:
    logger.info("Initializing ElasticsearchAdapter (index %s)...", settings.index_name)
    return ElasticsearchAdapter(
        url=settings.elasticsearch_url,
        index_name=settings.index_name,
        api_key=settings.elasticsearch_api_key,
        request_timeout=settings.request_timeout,
    )


@lru_cache
def get_content_store() -> ContentStorePort:
    if settings.content_store_factory:
        logger.info("Loading content store from %s...", settings.content_store_factory)
        return load_content_store(settings.content_store_factory)

    logger.warning("CONTENT_STORE_FACTORY not set, using an empty in-memory content store")
    return InMemoryContentStore(stage=Stage.parse(settings.default_stage))


@lru_cache
def get_mapper() -> DocumentMapper:
    mapper = DocumentMapper(max_hierarchy_depth=settings.max_hierarchy_depth)
    register_discovery(mapper)
    return mapper


@lru_cache
def get_indexer() -> StageAwareIndexer:
    logger.info("Initializing StageAwareIndexer...")
    return StageAwareIndexer(get_document_store(), get_content_store(), get_mapper())


@lru_cache
def get_reindex_task() -> ReindexTask:
    return ReindexTask(get_indexer())


@lru_cache
def get_materializer() -> ResultMaterializer:
    return ResultMaterializer(get_content_store(), get_document_store())


@lru_cache
def get_facet_engine() -> FacetEngine:
    return FacetEngine(get_materializer())


@lru_cache
def get_search_service() -> SearchService:
    logger.info("Initializing SearchService...")
    return SearchService(get_document_store(), get_materializer(), get_facet_engine())


def reset() -> None:
    """Drop every cached component so the next call rebuilds it."""
    for getter in (
        get_document_store,
        get_content_store,
        get_mapper,
        get_indexer,
        get_reindex_task,
        get_materializer,
        get_facet_engine,
        get_search_service,
    ):
        getter.cache_clear()
