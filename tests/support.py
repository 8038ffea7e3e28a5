"""Sample record types and an in-memory document store for the test suite."""

from typing import Any

from stagesearch.core.domain import (
    Boostable,
    Categorised,
    FacetBlock,
    Hierarchical,
    IndexDocument,
    Permissioned,
    RawHit,
    Record,
    Routable,
    SearchQuery,
    SearchResponse,
    SearchVisible,
    Tagged,
    Versioned,
)
from stagesearch.core.domain.exceptions import IndexNotFoundError, StoreQueryError
from stagesearch.core.ports import DocumentStorePort


class Page(
    Record,
    Versioned,
    Hierarchical,
    Permissioned,
    SearchVisible,
    Routable,
    Categorised,
    Tagged,
    Boostable,
):
    """Versioned, tree-structured page."""

    type_name = "Page"
    searchable_fields = {
        "title": {"type": "text"},
        "content": {"type": "text"},
        "published": {"type": "date"},
    }

    def __init__(
        self,
        id: int,
        title: str,
        content: str = "",
        parent: "Page | None" = None,
        public: bool = True,
        show_in_search: bool = True,
        categories: tuple[str, ...] = (),
        tags: tuple[str, ...] = (),
        keywords: tuple[str, ...] = (),
        published: str | None = None,
    ) -> None:
        self.id = id
        self.title = title
        self.content = content
        self.parent_page = parent
        self.public = public
        self.show_in_search = show_in_search
        self.categories = categories
        self.tags = tags
        self.keywords = keywords
        self.published = published

    @property
    def parent_id(self) -> int | None:
        return self.parent_page.id if self.parent_page else None

    def parent(self) -> "Page | None":
        return self.parent_page

    def can_view(self, viewer: Any | None) -> bool:
        return self.public or viewer is not None

    def can_show_in_search(self) -> bool:
        return self.show_in_search

    def relative_link(self) -> str:
        return "/" + self.title.lower().replace(" ", "-") + "/"

    def category_names(self) -> list[str]:
        return list(self.categories)

    def tag_titles(self) -> list[str]:
        return list(self.tags)

    def boost_terms(self) -> list[str]:
        return list(self.keywords)


class NewsPage(Page):
    type_name = "NewsPage"


class File(Record):
    """Unversioned record, visible in both stages at once."""

    type_name = "File"
    searchable_fields = {"title": {"type": "text"}, "size": {"type": "long"}}

    def __init__(self, id: int, title: str, size: int = 0) -> None:
        self.id = id
        self.title = title
        self.size = size


class Tag(Record):
    """Supporting type, only ever indexed through the records it tags."""

    type_name = "Tag"
    supporting_type = True

    def __init__(self, id: int, title: str) -> None:
        self.id = id
        self.title = title


class FakeDocumentStore(DocumentStorePort):
    """Document store that keeps documents in a dict and replays a canned response."""

    def __init__(self) -> None:
        self.documents: dict[str, IndexDocument] = {}
        self.mapping: dict[str, dict[str, Any]] | None = None
        self.exists = False
        self.deleted: list[str] = []
        self.queries: list[SearchQuery] = []
        self.response = SearchResponse(status=200)
        self.fail_ids: set[str] = set()
        self.fail_deletes = False

    def search(self, query: SearchQuery) -> SearchResponse:
        self.queries.append(query)
        return self.response

    def define_mapping(self, mapping: dict[str, dict[str, Any]]) -> None:
        self.mapping = mapping
        self.exists = True

    def delete_index(self) -> None:
        if not self.exists:
            raise IndexNotFoundError("Index stagesearch not found")
        self.exists = False
        self.mapping = None
        self.documents.clear()

    def index_exists(self) -> bool:
        return self.exists

    def index_documents(self, documents: list[IndexDocument]) -> int:
        for document in documents:
            if document.doc_id in self.fail_ids:
                raise StoreQueryError(f"Rejected {document.doc_id}")
            self.documents[document.doc_id] = document
        return len(documents)

    def delete_documents(self, ids: list[str]) -> int:
        if self.fail_deletes:
            raise StoreQueryError("Bulk delete rejected")
        self.deleted.extend(ids)
        for doc_id in ids:
            self.documents.pop(doc_id, None)
        return len(ids)


def hit(doc_id: str, score: float = 1.0, **source: Any) -> RawHit:
    return RawHit(id=doc_id, score=score, source=source)


def make_response(
    *hits: RawHit,
    total: int | None = None,
    start: int = 0,
    status: int = 200,
    facets: FacetBlock | None = None,
    aggregations: dict[str, Any] | None = None,
) -> SearchResponse:
    return SearchResponse(
        status=status,
        hits=tuple(hits),
        total=len(hits) if total is None else total,
        start=start,
        took=12,
        facets=facets,
        aggregations=aggregations or {},
    )
