"""Unit tests for bracketed query string handling."""

import pytest

from stagesearch.core.services import query_params

pytestmark = pytest.mark.unit


class TestParse:
    def test_nested_structure(self):
        params = query_params.parse_query_string(
            "q=hello&filter[category][]=News&filter[category][]=Sport&aggregation[tags]=red"
        )

        assert params == {
            "q": "hello",
            "filter": {"category": ["News", "Sport"]},
            "aggregation": {"tags": "red"},
        }

    def test_leading_question_mark_and_encoding(self):
        params = query_params.parse_query_string("?filter[category][]=%22Press%20release%22")

        assert params == {"filter": {"category": ['"Press release"']}}

    def test_build_is_inverse_of_parse(self):
        query_string = "q=hello&filter[category][]=News&filter[category][]=Sport&aggregation[tags][]=red"

        assert query_params.build_query_string(query_params.parse_query_string(query_string)) == query_string

    def test_repeated_plain_key_is_a_list(self):
        params = query_params.parse_query_string("Tag=a&Tag=b&Tag=c")

        assert params == {"Tag": ["a", "b", "c"]}
        assert isinstance(params["Tag"], query_params.RepeatedValue)


class TestWithFilter:
    def test_adds_filter(self):
        assert query_params.with_filter("q=x", "category", "News") == "q=x&filter[category][]=News"

    def test_adding_twice_does_not_duplicate(self):
        once = query_params.with_filter("", "category", "News")

        assert query_params.with_filter(once, "category", "News") == once

    def test_keeps_other_terms(self):
        query_string = query_params.with_filter("filter[tags][]=red", "category", "News")

        assert query_params.active_filters(query_params.parse_query_string(query_string)) == {
            "tags": ["red"],
            "category": ["News"],
        }

    def test_keeps_repeated_plain_keys(self):
        query_string = query_params.with_filter("SortBy=title&Tag=a&Tag=b", "category", "News")

        assert query_string == "SortBy=title&Tag=a&Tag=b&filter[category][]=News"

    def test_quoted_value_round_trips(self):
        query_string = query_params.with_filter("", "category", query_params.quoted("Press release"))

        assert query_string == "filter[category][]=%22Press%20release%22"
        assert query_params.active_filters(query_params.parse_query_string(query_string)) == {
            "category": ['"Press release"']
        }


class TestAggregationParams:
    def test_with_aggregation_replaces_previous_selection(self):
        query_string = query_params.with_aggregation("q=x&aggregation[tags]=red", "category", "News")

        assert query_string == "q=x&aggregation[category]=News"

    def test_active_aggregations_accepts_single_and_list(self):
        params = query_params.parse_query_string("aggregation[tags]=red&aggregation[category][]=News")

        assert query_params.active_aggregations(params) == {"tags": ["red"], "category": ["News"]}

    def test_without(self):
        assert query_params.without("q=x&url=/a&aggregation[tags]=red", "url", "aggregation") == "q=x"


class TestHelpers:
    def test_active_filters_drop_blank_values(self):
        params = query_params.parse_query_string("filter[category][]=&filter[tags][]=red")

        assert query_params.active_filters(params) == {"tags": ["red"]}

    def test_active_filters_ignore_scalar_filter_param(self):
        assert query_params.active_filters({"filter": "oops"}) == {}

    @pytest.mark.parametrize(
        "base, query, expected",
        [
            ("/search", "", "/search"),
            ("/search", "q=x", "/search?q=x"),
            ("/search?page=2", "q=x", "/search?page=2&q=x"),
        ],
    )
    def test_link(self, base, query, expected):
        assert query_params.link(base, query) == expected
