"""Unit tests for facet maps, aggregation groups and their links."""

import pytest

from stagesearch.core.domain import FacetBlock, SearchContext, Stage
from stagesearch.core.services.facets import parse_buckets
from tests.support import make_response

pytestmark = pytest.mark.unit


def _bucket(key, doc_count, *doc_ids):
    return {
        "key": key,
        "doc_count": doc_count,
        "top_facet_docs": {
            "hits": {"hits": [{"_id": doc_id, "_score": 1.0, "_source": {}} for doc_id in doc_ids]}
        },
    }


@pytest.fixture
def facet_block():
    return FacetBlock(
        fields={"category": {"News": 3, "Sport": 1, "_empty_": 9}},
        queries={"category:Arts OR Music": 2, "tags:red": 1, "nocolon": 4},
    )


@pytest.fixture
def context():
    return SearchContext(stage=Stage.LIVE, base_link="/search")


class TestGetFacets:
    def test_field_entries_come_before_query_entries(self, facet_engine, facet_block):
        facets = facet_engine.get_facets(make_response(facets=facet_block))

        assert [e.name for e in facets["category"]] == ["News", "Sport", "category:Arts OR Music"]
        assert [e.is_query_facet for e in facets["category"]] == [False, False, True]

    def test_query_facet_query_is_text_after_first_colon(self, facet_engine):
        block = FacetBlock(queries={"published:[2020 TO 2021]": 5, "url:http://x": 1})

        facets = facet_engine.get_facets(make_response(facets=block))

        assert facets["published"][0].query == "[2020 TO 2021]"
        assert facets["url"][0].query == "http://x"

    def test_counts_and_empty_bucket(self, facet_engine, facet_block):
        facets = facet_engine.get_facets(make_response(facets=facet_block))

        assert [e.count for e in facets["category"]] == [3, 1, 2]
        assert facets["tags"][0].name == "tags:red"

    def test_query_without_field_is_skipped(self, facet_engine, facet_block):
        facets = facet_engine.get_facets(make_response(facets=facet_block))

        assert set(facets) == {"category", "tags"}

    def test_store_exception_gives_empty_map(self, facet_engine):
        block = FacetBlock(fields={"category": {"News": 1}}, exception="shard failure")

        assert facet_engine.get_facets(make_response(facets=block)) == {}

    def test_no_facet_block(self, facet_engine):
        assert facet_engine.get_facets(make_response()) is None

    def test_result_set_exposes_facets(self, materializer, facet_engine, facet_block):
        from stagesearch.core.domain import SearchQuery

        result = materializer.materialize(
            SearchQuery(), make_response(facets=facet_block), SearchContext(), facet_engine
        )

        assert [e.name for e in result.facets["tags"]] == ["tags:red"]


class TestCurrentFacets:
    def test_labels_and_links(self, facet_engine, facet_block, context):
        facets = facet_engine.get_facets(make_response(facets=facet_block))
        labels = {"News": "Latest news", "category:Arts OR Music": "Culture"}

        entries = facet_engine.current_facets(facets, context, labels, term="category")

        assert [e.display_name for e in entries] == ["Latest news", "Sport", "Culture"]
        assert entries[1].search_link == "/search?filter[category][]=Sport"
        assert entries[1].quoted_search_link == "/search?filter[category][]=%22Sport%22"
        assert entries[2].search_link == "/search?filter[category][]=Arts%20OR%20Music"

    def test_links_keep_active_filters(self, facet_engine, facet_block):
        context = SearchContext(base_link="/search", query_string="q=ocean&filter[category][]=News")
        facets = facet_engine.get_facets(make_response(facets=facet_block))

        entries = {e.name: e for e in facet_engine.current_facets(facets, context)}

        assert entries["Sport"].search_link == (
            "/search?q=ocean&filter[category][]=News&filter[category][]=Sport"
        )
        # Already active, so the link is unchanged rather than duplicated
        assert entries["News"].search_link == "/search?q=ocean&filter[category][]=News"
        assert entries["tags:red"].search_link == (
            "/search?q=ocean&filter[category][]=News&filter[tags][]=red"
        )

    def test_calling_twice_is_stable(self, facet_engine, facet_block, context):
        facets = facet_engine.get_facets(make_response(facets=facet_block))

        first = [e.search_link for e in facet_engine.current_facets(facets, context)]
        second = [e.search_link for e in facet_engine.current_facets(facets, context)]

        assert first == second

    def test_calls_do_not_share_labels_or_links(self, facet_engine, facet_block, context):
        facets = facet_engine.get_facets(make_response(facets=facet_block))

        facet_engine.current_facets(facets, context, {"News": "Latest"}, term="category")
        other = SearchContext(base_link="/search", query_string="b=2")
        (news, *_) = facet_engine.current_facets(facets, other, {}, term="category")

        assert news.label is None
        assert news.search_link == "/search?b=2&filter[category][]=News"
        cached = facets["category"][0]
        assert cached.label is None
        assert cached.search_link is None

    def test_empty_facets(self, facet_engine, context):
        assert facet_engine.current_facets(None, context) == []
        assert facet_engine.current_facets({}, context) == []


class TestAggregations:
    def _response(self):
        return make_response(
            aggregations={
                "category": {
                    "buckets": [
                        _bucket("News", 2, "Page_1_Live", "Page_99_Live"),
                        _bucket("", 4, "Page_2_Live"),
                        _bucket("Empty", 3),
                    ]
                }
            }
        )

    def test_groups_with_resolved_children(self, facet_engine):
        context = SearchContext(stage=Stage.LIVE, base_link="/search", query_string="q=x&url=/search")

        groups = facet_engine.aggregated_results(self._response(), "category", context)

        assert len(groups) == 1
        assert groups[0].title == "News"
        assert groups[0].doc_count == 2
        assert [item.record.id for item in groups[0].children] == [1]
        assert groups[0].link == "/search?q=x&aggregation[category]=News"

    def test_selected_aggregation_disables_grouping(self, facet_engine):
        context = SearchContext(stage=Stage.LIVE, query_string="aggregation[category]=News")

        assert facet_engine.is_search_filtered(context)
        assert facet_engine.aggregated_results(self._response(), "category", context) is None

    def test_missing_aggregation(self, facet_engine):
        assert facet_engine.aggregated_results(self._response(), "tags", SearchContext()) is None

    def test_failed_response(self, facet_engine):
        response = make_response(status=503)

        assert facet_engine.aggregated_results(response, "category", SearchContext()) is None

    def test_active_aggregation_filters(self, facet_engine):
        context = SearchContext(base_link="/search", query_string="q=x&aggregation[category]=News")

        (active,) = facet_engine.aggregation_filters(context, {"category": "Category"})

        assert active.key == "News"
        assert active.label == "Category"
        assert active.link == "/search?q=x"

    def test_no_active_aggregation(self, facet_engine):
        context = SearchContext(query_string="q=x")

        assert facet_engine.aggregation_filters(context) == []
        assert not facet_engine.is_search_filtered(context)


class TestParseBuckets:
    def test_skips_empty_keys_and_previews(self):
        buckets = parse_buckets(
            {"buckets": [_bucket("A", 1, "Page_1_Live"), _bucket("", 1, "Page_2_Live"), _bucket("B", 2)]}
        )

        assert [b.key for b in buckets] == ["A"]

    def test_numeric_keys_become_strings(self):
        assert parse_buckets({"buckets": [_bucket(2024, 1, "Page_1_Live")]})[0].key == "2024"

    def test_missing_aggregation(self):
        assert parse_buckets(None) == []
