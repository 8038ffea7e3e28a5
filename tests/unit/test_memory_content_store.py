"""Unit tests for the in-memory content store."""

import pytest

from stagesearch.adapters.outbound.memory_content_store import InMemoryContentStore
from stagesearch.core.domain import Record, Stage
from stagesearch.core.domain.exceptions import InvalidConfigurationError
from tests.support import File, Page

pytestmark = pytest.mark.unit


@pytest.fixture
def store():
    store = InMemoryContentStore()
    store.register(Page, File)
    return store


class TestInMemoryContentStore:
    def test_save_writes_draft_only(self, store):
        store.save(Page(1, "Home"))

        assert store.get_by_type_and_id("Page", 1, Stage.DRAFT).title == "Home"
        assert store.get_by_type_and_id("Page", 1, Stage.LIVE) is None

    def test_publish_snapshots_live_copy(self, store):
        page = Page(1, "Home")
        store.publish(page)
        page.title = "Home (edited)"
        store.save(page)

        assert store.get_by_type_and_id("Page", 1, Stage.LIVE).title == "Home"
        assert store.get_by_type_and_id("Page", 1, Stage.DRAFT).title == "Home (edited)"

    def test_unpublish_keeps_draft(self, store):
        page = store.publish(Page(1, "Home"))
        store.unpublish(page)

        assert store.get_by_type_and_id("Page", 1, Stage.LIVE) is None
        assert store.get_by_type_and_id("Page", 1, Stage.DRAFT) is not None

    def test_delete_removes_every_copy(self, store):
        page = store.publish(Page(1, "Home"))
        store.delete(page)

        assert store.get_by_type_and_id("Page", 1, Stage.DRAFT) is None
        assert store.get_by_type_and_id("Page", 1, Stage.LIVE) is None

    def test_list_by_type_in_id_order(self, store):
        for page_id in (3, 1, 2):
            store.publish(Page(page_id, f"Page {page_id}"))
        store.publish(File(9, "Report"))

        assert [p.id for p in store.list_by_type("Page", Stage.LIVE)] == [1, 2, 3]
        assert [f.id for f in store.list_by_type("File", Stage.LIVE)] == [9]

    def test_current_stage(self, store):
        assert store.current_stage() is Stage.LIVE

        store.use_stage(Stage.DRAFT)

        assert store.current_stage() is Stage.DRAFT

    def test_types(self, store):
        assert store.registered_types() == {"Page": Page, "File": File}
        assert store.get_type("File") is File
        assert store.get_type("Gallery") is None

    def test_saving_registers_the_type(self):
        store = InMemoryContentStore()
        store.save(File(1, "Report"))

        assert store.get_type("File") is File

    def test_type_without_name_is_rejected(self):
        class Nameless(Record):
            pass

        with pytest.raises(InvalidConfigurationError):
            InMemoryContentStore().register(Nameless)

    def test_unversioned_record_is_read_in_every_stage(self, store):
        store.save(File(7, "Minutes"))

        assert store.get_by_type_and_id("File", 7, Stage.LIVE).title == "Minutes"
        assert store.get_by_type_and_id("File", 7, Stage.DRAFT).title == "Minutes"
        assert [f.id for f in store.list_by_type("File", Stage.LIVE)] == [7]

    def test_unpublish_leaves_unversioned_record(self, store):
        report = store.publish(File(7, "Minutes"))
        store.unpublish(report)

        assert store.get_by_type_and_id("File", 7, Stage.LIVE) is report
