"""Unit tests for stages, document identifiers and result models."""

import pytest

from stagesearch.core.domain import DocumentId, FieldSpec, IndexDocument, PaginatedList, Stage
from stagesearch.core.domain.exceptions import MalformedIdentifierError, ValidationError
from tests.support import File, NewsPage, Page

pytestmark = pytest.mark.unit


class TestStage:
    @pytest.mark.parametrize(
        "value, expected",
        [("Live", Stage.LIVE), ("Stage", Stage.DRAFT), ("draft", Stage.DRAFT), ("LIVE", Stage.LIVE)],
    )
    def test_parse(self, value, expected):
        assert Stage.parse(value) is expected

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValidationError):
            Stage.parse("Archive")

    def test_values_are_index_markers(self):
        assert Stage.DRAFT.value == "Stage"
        assert Stage.all_values() == ["Live", "Stage"]


class TestDocumentId:
    def test_build(self):
        assert IndexDocument.build_id("Page", 12, Stage.LIVE) == "Page_12_Live"
        assert IndexDocument.build_id("File", 3) == "File_3"

    def test_parse_staged(self):
        doc_id = DocumentId.parse("Page_12_Stage")

        assert doc_id == DocumentId("Page", "12", Stage.DRAFT)
        assert not doc_id.is_raw

    def test_parse_stage_less(self):
        assert DocumentId.parse("File_3") == DocumentId("File", "3", None)

    def test_parse_raw(self):
        assert DocumentId.parse("@raw_faq").is_raw

    @pytest.mark.parametrize("raw_id", ["Page", "Page_1_Live_x", "Page_1_Draft", "_1", "Page_"])
    def test_parse_rejects_malformed(self, raw_id):
        with pytest.raises(MalformedIdentifierError):
            DocumentId.parse(raw_id)


class TestRecordTypes:
    def test_type_ancestry(self):
        assert Page.type_ancestry() == ["Page"]
        assert NewsPage.type_ancestry() == ["Page", "NewsPage"]
        assert File.type_ancestry() == ["File"]

    def test_field_value_missing_field(self):
        assert File(3, "Report").field_value("colour") is None

    def test_field_spec_round_trip(self):
        spec = FieldSpec.from_dict({"type": "date", "format": "yyyy"})

        assert spec.to_dict() == {"type": "date", "format": "yyyy"}
        assert FieldSpec.from_dict({}).to_dict() == {"type": "text"}


class TestPaginatedList:
    def test_first_page(self):
        page = PaginatedList([1, 2], page_length=2, page_start=0, total_items=5)

        assert list(page) == [1, 2]
        assert page[1] == 2
        assert page.current_page == 1
        assert page.total_pages == 3
        assert page.has_next
        assert not page.has_previous

    def test_empty(self):
        page = PaginatedList.empty(10)

        assert len(page) == 0
        assert page.total_pages == 1
        assert not page.has_next
