"""Unit tests for query planning and pagination.

Run with: pytest tests/test_query.py -v
"""

import pytest
from django.http import QueryDict

from events.domain.query import (
    EVENT_SORT,
    MAX_LIMIT,
    MAX_OFFSET,
    EventFilters,
    EventQuery,
    SortKey,
    build_predicate,
    paginate,
    parse_positive_int,
    plan,
)
from events.domain.value_objects import EventMode


class TestParsePositiveInt:
    @pytest.mark.parametrize(
        "raw, expected",
        [("3", 3), (" 7 ", 7), (4, 4), ("0", 10), ("-2", 10), ("abc", 10), ("2.5", 10), (None, 10), (True, 10)],
    )
    def test_lenient_parsing(self, raw, expected):
        assert parse_positive_int(raw, 10) == expected


class TestBuildPredicate:
    def test_empty_filters_match_everything(self):
        assert build_predicate(EventFilters()) == EventQuery()

    def test_unknown_mode_is_dropped(self):
        assert build_predicate(EventFilters(mode="virtual")).mode is None

    def test_known_mode_is_kept(self):
        assert build_predicate(EventFilters(mode="online")).mode is EventMode.ONLINE

    def test_tags_are_split_and_trimmed(self):
        predicate = build_predicate(EventFilters(tags=" ai, africa ,,ai"))
        assert predicate.tags == ("ai", "africa")

    def test_tag_lists_may_hold_comma_strings(self):
        predicate = build_predicate(EventFilters(tags=["ai, web", "africa", 7]))
        assert predicate.tags == ("ai", "web", "africa")

    def test_blank_search_is_ignored(self):
        assert build_predicate(EventFilters(search="   ")).search is None

    def test_from_params_reads_known_keys(self):
        filters = EventFilters.from_params({"search": "dev", "mode": "hybrid", "page": "2"})
        assert filters == EventFilters(search="dev", mode="hybrid", tags=None)

    def test_from_params_merges_repeated_tags(self):
        filters = EventFilters.from_params(QueryDict("tags=ai&tags=web,cloud"))
        assert build_predicate(filters).tags == ("ai", "web", "cloud")
        assert EventFilters.from_params(QueryDict("")).tags is None


class TestPlan:
    def test_second_page_of_online_events(self):
        query_plan = plan(EventFilters(mode="online"), page=2, limit=5)
        assert query_plan.skip == 5
        assert query_plan.limit == 5
        assert query_plan.predicate.mode is EventMode.ONLINE

        page = paginate(["e"] * 5, 12, query_plan)
        assert page.total_pages == 3
        assert page.total_count == 12
        assert page.current_page == 2
        assert page.has_next_page is True
        assert page.has_prev_page is True

    def test_defaults_apply_to_malformed_input(self):
        query_plan = plan(EventFilters(), page="first", limit="lots")
        assert (query_plan.page, query_plan.skip, query_plan.limit) == (1, 0, 10)

    def test_limit_above_ceiling_falls_back(self):
        assert plan(EventFilters(), limit=MAX_LIMIT).limit == MAX_LIMIT
        assert plan(EventFilters(), limit=MAX_LIMIT + 1).limit == 10

    @pytest.mark.parametrize("raw", ["99999999999999999999", 2**63, str(2**62)])
    def test_unaddressable_page_falls_back(self, raw):
        query_plan = plan(EventFilters(), page=raw, limit=5)
        assert (query_plan.page, query_plan.skip) == (1, 0)

    def test_far_page_keeps_offset_in_range(self):
        query_plan = plan(EventFilters(), page=10**15, limit=MAX_LIMIT)
        assert query_plan.page == 10**15
        assert query_plan.skip + query_plan.limit <= MAX_OFFSET

    def test_default_limit_can_be_configured(self):
        assert plan(EventFilters(), default_limit=25).limit == 25

    def test_sort_is_date_then_newest(self):
        assert plan(EventFilters()).sort == EVENT_SORT == (
            SortKey("date"),
            SortKey("created_at", descending=True),
        )

    def test_last_page_has_no_next(self):
        page = paginate(["e"] * 2, 12, plan(EventFilters(), page=3, limit=5))
        assert page.has_next_page is False
        assert page.has_prev_page is True

    def test_empty_result(self):
        page = paginate([], 0, plan(EventFilters()))
        assert page.total_pages == 0
        assert page.has_next_page is False
        assert page.has_prev_page is False
