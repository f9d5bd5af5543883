"""Unit tests for SearchStateManager."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from rental_query.application.filters import MECHANISM_KEYS
from rental_query.application.search import HISTORY_LIMIT, SearchState, SearchStateManager
from rental_query.testing.generators import filter_name_strategy, filters_strategy


# ---------------------------------------------------------------------------
# Query and history
# ---------------------------------------------------------------------------


class TestQuery:
    def test_initial_state(self) -> None:
        state = SearchStateManager().state
        assert state == SearchState()
        assert not state.has_active_filters

    def test_set_query_strips_and_flags_searching(self) -> None:
        state = SearchStateManager().set_query("  studio  ")
        assert state.query == "studio"
        assert state.is_searching
        assert state.has_active_filters

    def test_empty_query_clears_searching(self) -> None:
        manager = SearchStateManager()
        manager.set_query("studio")
        state = manager.set_query("   ")
        assert state.query == ""
        assert not state.is_searching
        assert state.search_history == ("studio",)

    def test_history_is_most_recent_first_and_deduplicated(self) -> None:
        manager = SearchStateManager()
        for query in ("a", "b", "a", "a"):
            manager.set_query(query)
        assert manager.state.search_history == ("a", "b")

    def test_history_is_capped(self) -> None:
        manager = SearchStateManager()
        for i in range(HISTORY_LIMIT + 5):
            manager.set_query(f"q{i}")
        history = manager.state.search_history
        assert len(history) == HISTORY_LIMIT
        assert history[0] == f"q{HISTORY_LIMIT + 4}"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    def test_update_filters_normalizes(self) -> None:
        state = SearchStateManager().update_filters({"min_price": 100, "property_type": ["a", "b"]})
        assert state.filters == {"price__gte": 100, "property_type": "a,b"}
        assert state.active_filter_names == frozenset({"price__gte", "property_type"})

    def test_update_filters_merges(self) -> None:
        manager = SearchStateManager()
        manager.update_filters({"city": "Leeds"})
        state = manager.update_filters({"bedrooms": 2})
        assert state.filters == {"bedrooms": 2, "city": "Leeds"}

    def test_none_removes_a_filter(self) -> None:
        manager = SearchStateManager()
        manager.update_filters({"city": "Leeds", "bedrooms": 2})
        assert manager.update_filters({"city": None}).filters == {"bedrooms": 2}

    def test_range_update_replaces_whole_range(self) -> None:
        manager = SearchStateManager()
        manager.update_filters({"price": {"min": 100, "max": 900}})
        state = manager.update_filters({"price": {"min": 200}})
        assert state.filters == {"price__gte": 200}

    def test_prefixed_bound_clears_only_its_side(self) -> None:
        manager = SearchStateManager()
        manager.update_filters({"min_price": 100, "max_price": 900})
        assert manager.update_filters({"min_price": None}).filters == {"price__lte": 900}

    def test_clear_filter_by_range_name(self) -> None:
        manager = SearchStateManager()
        manager.update_filters({"price": {"min": 1, "max": 2}, "city": "York"})
        state = manager.clear_filter("price")
        assert state.filters == {"city": "York"}
        assert state.active_filter_names == frozenset({"city"})

    def test_clear_all_keeps_history(self) -> None:
        manager = SearchStateManager()
        manager.set_query("flat")
        manager.update_filters({"city": "York"})
        state = manager.clear_all_filters()
        assert state.filters == {}
        assert state.query == ""
        assert state.search_history == ("flat",)

    def test_mechanism_keys_are_not_active(self) -> None:
        state = SearchStateManager().update_filters({"page": 3, "ordering": "-price"})
        assert state.active_filter_names == frozenset()
        assert not state.has_active_filters


class TestSort:
    def test_set_sort(self) -> None:
        state = SearchStateManager().set_sort("-price")
        assert state.ordering == "-price"

    def test_empty_sort_clears_ordering(self) -> None:
        manager = SearchStateManager()
        manager.set_sort("-price")
        assert manager.set_sort(None).ordering is None
        manager.set_sort("price")
        assert manager.set_sort("").ordering is None


class TestResetAndListeners:
    def test_reset_drops_everything(self) -> None:
        manager = SearchStateManager()
        manager.set_query("x")
        manager.update_filters({"city": "York"})
        assert manager.reset() == SearchState()

    def test_listeners_receive_each_state(self) -> None:
        manager = SearchStateManager()
        seen: list[SearchState] = []
        unsubscribe = manager.subscribe(seen.append)
        manager.set_query("a")
        manager.update_filters({"city": "York"})
        unsubscribe()
        manager.set_query("b")
        assert [s.query for s in seen] == ["a", "a"]
        assert seen[-1].filters == {"city": "York"}


# ---------------------------------------------------------------------------
# Active-filter accounting
# ---------------------------------------------------------------------------


_operations = st.lists(
    st.one_of(
        filters_strategy(max_size=3).map(lambda f: ("update", f)),
        filter_name_strategy().map(lambda n: ("clear", n)),
    ),
    max_size=8,
)


class TestActiveFilterAccounting:
    @given(_operations)
    def test_active_names_track_filter_keys(self, operations: list) -> None:
        manager = SearchStateManager()
        for kind, arg in operations:
            if kind == "update":
                manager.update_filters(arg)
            else:
                manager.clear_filter(arg)
            state = manager.state
            assert state.active_filter_names == frozenset(state.filters) - MECHANISM_KEYS
