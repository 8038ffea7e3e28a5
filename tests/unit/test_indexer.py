"""Unit tests for lifecycle-driven indexing."""

import pytest

from stagesearch.core.domain import Stage
from stagesearch.core.domain.exceptions import RecordIndexingError, StoreQueryError
from tests.support import File, Page, Tag

pytestmark = pytest.mark.unit


class TestLifecycleHooks:
    """Each lifecycle event touches exactly one stage's document."""

    def test_save_writes_draft_document(self, indexer, document_store):
        indexer.on_after_write(Page(10, "New page"))

        assert list(document_store.documents) == ["Page_10_Stage"]

    def test_publish_writes_live_document(self, indexer, document_store):
        indexer.on_after_publish(Page(10, "New page"))

        assert list(document_store.documents) == ["Page_10_Live"]
        assert document_store.documents["Page_10_Live"].fields["stage"] == ["Live"]

    def test_recursive_publish_writes_live_document(self, indexer, document_store):
        indexer.on_after_publish_recursive(Page(10, "New page"))

        assert "Page_10_Live" in document_store.documents

    def test_unpublish_removes_only_live_document(self, indexer, document_store):
        page = Page(10, "New page")
        indexer.on_after_write(page)
        indexer.on_after_publish(page)

        removed = indexer.unpublish(page)

        assert removed == "Page_10_Live"
        assert document_store.deleted == ["Page_10_Live"]
        assert list(document_store.documents) == ["Page_10_Stage"]

    def test_delete_without_unpublish_removes_draft(self, indexer, document_store):
        page = Page(10, "New page")
        indexer.on_after_write(page)

        assert indexer.on_after_delete(page) == "Page_10_Stage"
        assert document_store.documents == {}

    def test_unpublish_marker_is_consumed(self, indexer, document_store):
        page = Page(10, "New page")
        indexer.on_before_unpublish(page)
        indexer.on_after_delete(page)
        indexer.on_after_delete(page)

        assert document_store.deleted == ["Page_10_Live", "Page_10_Stage"]

    def test_unpublish_runs_store_unpublish_first(self, indexer, content_store, document_store):
        home = content_store.get_by_type_and_id("Page", 1, Stage.LIVE)

        indexer.unpublish(home, content_store.unpublish)

        assert content_store.get_by_type_and_id("Page", 1, Stage.LIVE) is None
        assert document_store.deleted == ["Page_1_Live"]

    def test_failed_store_unpublish_clears_marker(self, indexer, document_store):
        page = Page(10, "New page")

        def refuse(record):
            raise RuntimeError("locked")

        with pytest.raises(RuntimeError):
            indexer.unpublish(page, refuse)

        assert indexer.on_after_delete(page) == "Page_10_Stage"
        assert document_store.deleted == ["Page_10_Stage"]

    def test_failed_removal_clears_marker(self, indexer, document_store):
        page = Page(10, "New page")
        document_store.fail_deletes = True

        with pytest.raises(StoreQueryError):
            indexer.unpublish(page)

        document_store.fail_deletes = False
        assert indexer.on_after_delete(page) == "Page_10_Stage"

    def test_unversioned_record_has_single_document(self, indexer, document_store):
        report = File(3, "Report")
        indexer.on_after_write(report)

        assert list(document_store.documents) == ["File_3"]
        assert indexer.on_after_delete(report) == "File_3"


class TestReindex:
    """Tests for single-record indexing and type discovery."""

    def test_store_failure_is_wrapped(self, indexer, document_store):
        document_store.fail_ids.add("Page_1_Live")

        with pytest.raises(RecordIndexingError) as exc_info:
            indexer.reindex(Page(1, "Home"), Stage.LIVE)

        assert exc_info.value.extra_context == {"type": "Page", "id": 1, "stage": "Live"}
        assert exc_info.value.cause is not None

    def test_indexable_types_skip_supporting_types(self, indexer):
        types = indexer.indexable_types()

        assert Page in types
        assert File in types
        assert Tag not in types

    def test_define_mapping_covers_every_registered_type(self, indexer, document_store):
        indexer.define_mapping()

        assert document_store.exists
        assert {"title", "content", "size", "parents_hierarchy"} <= set(document_store.mapping)
        assert document_store.mapping["content"] == {"type": "text", "store": False}
        assert document_store.mapping["published"] == {"type": "date", "format": "date_optional_time"}
        assert document_store.mapping["class_name_hierarchy"] == {"type": "keyword", "store": True}
