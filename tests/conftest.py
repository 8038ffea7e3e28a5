"""
Pytest configuration and shared fixtures.
"""

import pytest

from stagesearch.adapters.outbound.memory_content_store import InMemoryContentStore
from stagesearch.core.services import (
    DocumentMapper,
    FacetEngine,
    ReindexTask,
    ResultMaterializer,
    StageAwareIndexer,
    register_discovery,
)
from tests.support import FakeDocumentStore, File, Page, Tag


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (HTTP and CLI surfaces)")
    config.addinivalue_line("markers", "slow: Slow tests (network, large data)")


@pytest.fixture
def document_store():
    return FakeDocumentStore()


@pytest.fixture
def content_store():
    """Content store with a small published site.

    Live: Home (1), About (2, child of Home), Report (File 3).
    Draft only: Drafts (4).
    """
    store = InMemoryContentStore()
    store.register(Page, File, Tag)

    home = Page(1, "Home", content="Welcome home", categories=("News",), tags=("red",))
    about = Page(2, "About", content="About us", parent=home)
    store.publish(home)
    store.publish(about)
    store.publish(File(3, "Report", size=1024))
    store.save(Page(4, "Drafts", content="Not yet"))
    store.save(Tag(5, "red"))
    return store


@pytest.fixture
def mapper():
    return register_discovery(DocumentMapper())


@pytest.fixture
def indexer(document_store, content_store, mapper):
    return StageAwareIndexer(document_store, content_store, mapper)


@pytest.fixture
def reindex_task(indexer):
    return ReindexTask(indexer)


@pytest.fixture
def materializer(content_store, document_store):
    return ResultMaterializer(content_store, document_store)


@pytest.fixture
def facet_engine(materializer):
    return FacetEngine(materializer)
