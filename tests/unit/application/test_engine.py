"""Unit tests for ResourceQueryEngine (list queries, cache, races, paging)."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from rental_query.adapters.http import TransportResponse
from rental_query.application.query import EngineStatus, ResourceDefinition, SortOption
from rental_query.application.query.engine import ResourceQueryEngine
from rental_query.kernel.time import FrozenClock
from rental_query.testing.fakes import FakeTransport

THINGS = ResourceDefinition(
    name="things",
    endpoint="/things/",
    ttl=60,
    sort_options=(SortOption("-price", "Price: High to Low", "desc"),),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _page(*ids: int, count: int | None = None, next: str | None = None, previous: str | None = None) -> dict:
    return {
        "count": len(ids) if count is None else count,
        "next": next,
        "previous": previous,
        "results": [{"id": i, "name": f"thing-{i}"} for i in ids],
    }


def _engine(
    transport: Any,
    clock: FrozenClock,
    definition: ResourceDefinition = THINGS,
    **kwargs: Any,
) -> ResourceQueryEngine[dict]:
    kwargs.setdefault("debounce_seconds", 0.01)
    return ResourceQueryEngine(definition, transport, lambda: {"Authorization": "Bearer t"}, clock=clock, **kwargs)


def _ids(engine: ResourceQueryEngine[dict]) -> list[int]:
    return [item["id"] for item in engine.items]


class _ExplodingTransport:
    async def request(self, method, endpoint, data=None, headers=None) -> TransportResponse:
        raise RuntimeError("socket closed")


# ---------------------------------------------------------------------------
# fetch_list
# ---------------------------------------------------------------------------


class TestFetchList:
    def test_applies_result(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1, 2, count=40, next="https://api.test/things/?page=2"))
        engine = _engine(fake_transport, fake_clock)

        result = asyncio.run(engine.fetch_list())

        assert result is not None
        assert result.count == 40
        assert _ids(engine) == [1, 2]
        assert engine.status is EngineStatus.SUCCESS
        assert engine.error is None
        assert engine.pagination.next == "https://api.test/things/?page=2"

    def test_sends_auth_headers_and_filters(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        engine = _engine(fake_transport, fake_clock)
        engine.set_search_query("flat")
        engine.update_filters({"min_price": 5, "types": ["a", "b"]})

        asyncio.run(engine.fetch_list({"page": 2}))

        call = fake_transport.last_call
        assert call.headers == {"Authorization": "Bearer t"}
        assert call.data == {"page": 2, "price__gte": 5, "search": "flat", "types": "a,b"}
        assert engine.current_page == 2

    def test_overrides_win_over_search_filters(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        engine = _engine(fake_transport, fake_clock)
        engine.update_filters({"city": "York"})
        assert engine.compose_filters({"city": "Leeds"}) == {"city": "Leeds"}

    def test_forced_filters_are_applied_last(self, fake_clock: FrozenClock) -> None:
        definition = ResourceDefinition(name="people", endpoint="/people/", ttl=60, forced_filters={"roles": "student"})
        engine = _engine(FakeTransport(), fake_clock, definition)
        engine.update_filters({"roles": "admin"})
        assert engine.compose_filters({"roles": "landlord"}) == {"roles": "student"}

    def test_custom_endpoint(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/mine/", _page(7))
        engine = _engine(fake_transport, fake_clock)
        asyncio.run(engine.fetch_list(endpoint="mine/"))
        assert _ids(engine) == [7]


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class TestCaching:
    def test_second_fetch_is_served_from_cache(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1, 2, count=30, next="n"))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list()
            result = await engine.fetch_list()
            assert result is not None
            assert result.count == 30
            assert result.next == "n"

        asyncio.run(run())
        assert len(fake_transport.calls) == 1
        assert _ids(engine) == [1, 2]
        assert engine.status is EngineStatus.SUCCESS

    def test_use_cache_false_always_hits_network(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list()
            await engine.fetch_list(use_cache=False)

        asyncio.run(run())
        assert len(fake_transport.calls) == 2

    def test_entry_expires_after_ttl(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        fake_transport.respond("GET", "/things/", _page(2))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list()
            fake_clock.advance(seconds=59)
            await engine.fetch_list()
            assert _ids(engine) == [1]
            fake_clock.advance(seconds=1)
            await engine.fetch_list()

        asyncio.run(run())
        assert _ids(engine) == [2]
        assert len(fake_transport.calls) == 2

    def test_different_filters_use_different_entries(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list({"city": "York"})
            await engine.fetch_list({"city": "Leeds"})
            await engine.fetch_list({"city": "York"})

        asyncio.run(run())
        assert len(fake_transport.calls) == 2
        assert len(engine.cache) == 2

    def test_ttl_override(self, fake_clock: FrozenClock) -> None:
        engine = _engine(FakeTransport(), fake_clock, ttl=5)
        assert engine.cache.ttl == 5
        assert engine.definition.ttl == 5

    def test_clear_cache(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        engine = _engine(fake_transport, fake_clock)
        asyncio.run(engine.fetch_list())
        assert engine.clear_cache() == 1
        assert len(engine.cache) == 0


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_failure_clears_list_and_sets_error(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1, 2))
        fake_transport.fail("GET", "/things/", "Service unavailable", status=503)
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list()
            assert await engine.fetch_list(use_cache=False) is None

        asyncio.run(run())
        assert engine.items == ()
        assert engine.pagination is None
        assert engine.error == "Service unavailable"
        assert engine.status is EngineStatus.ERROR
        assert not engine.loading

    def test_failure_without_message_uses_fallback(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.script("GET", "/things/", TransportResponse(data={}, status=500, success=False))
        engine = _engine(fake_transport, fake_clock)
        asyncio.run(engine.fetch_list())
        assert engine.error == "Failed to fetch things"

    def test_failures_are_not_cached(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.fail("GET", "/things/", "down")
        fake_transport.respond("GET", "/things/", _page(1))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list()
            await engine.fetch_list()

        asyncio.run(run())
        assert _ids(engine) == [1]
        assert engine.error is None

    def test_malformed_payload_is_an_error(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", {"detail": "ok"})
        engine = _engine(fake_transport, fake_clock)
        assert asyncio.run(engine.fetch_list()) is None
        assert engine.error == "Unexpected response: missing 'results'"
        assert len(engine.cache) == 0

    def test_clear_error(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.fail("GET", "/things/", "down")
        engine = _engine(fake_transport, fake_clock)
        asyncio.run(engine.fetch_list())
        engine.clear_error()
        assert engine.error is None
        assert engine.status is EngineStatus.IDLE

    def test_transport_exception_propagates_and_settles(self, fake_clock: FrozenClock) -> None:
        engine = _engine(_ExplodingTransport(), fake_clock)
        with pytest.raises(RuntimeError):
            asyncio.run(engine.fetch_list())
        assert not engine.loading


# ---------------------------------------------------------------------------
# Overlapping requests
# ---------------------------------------------------------------------------


class TestOverlappingRequests:
    def test_late_older_response_is_discarded(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        fake_transport.respond("GET", "/things/", _page(2))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            gate = fake_transport.hold("GET", "/things/")
            first = asyncio.ensure_future(engine.fetch_list(use_cache=False))
            await asyncio.sleep(0)
            second = await engine.fetch_list(use_cache=False)
            assert second is not None
            assert engine.loading
            gate.set()
            assert await first is None

        asyncio.run(run())
        assert _ids(engine) == [2]
        assert engine.status is EngineStatus.SUCCESS
        assert not engine.loading

    def test_concurrent_fetches_keep_the_newest(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        fake_transport.respond("GET", "/things/", _page(2))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await asyncio.gather(engine.fetch_list(use_cache=False), engine.fetch_list(use_cache=False))

        asyncio.run(run())
        assert _ids(engine) == [2]

    def test_reset_discards_in_flight_response(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            gate = fake_transport.hold("GET", "/things/")
            pending = asyncio.ensure_future(engine.fetch_list())
            await asyncio.sleep(0)
            engine.reset()
            gate.set()
            assert await pending is None

        asyncio.run(run())
        assert engine.items == ()
        assert len(engine.cache) == 0


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


class TestPagination:
    def test_guards_before_any_fetch(self, fake_clock: FrozenClock) -> None:
        engine = _engine(FakeTransport(), fake_clock)
        assert not engine.can_fetch_next_page
        assert not engine.can_fetch_previous_page
        assert engine.total_pages == 0
        assert engine.current_page == 1

    def test_next_page_is_noop_without_cursor(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list()
            assert await engine.fetch_next_page() is None
            assert await engine.fetch_previous_page() is None

        asyncio.run(run())
        assert len(fake_transport.calls) == 1

    def test_next_and_previous_follow_cursors(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1, count=45, next="https://api.test/things/?page=2"))
        fake_transport.respond(
            "GET",
            "/things/",
            _page(2, count=45, next="https://api.test/things/?page=3", previous="https://api.test/things/"),
        )
        fake_transport.respond("GET", "/things/", _page(1, count=45, next="https://api.test/things/?page=2"))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list()
            assert engine.can_fetch_next_page
            await engine.fetch_next_page()
            assert engine.current_page == 2
            assert engine.can_fetch_previous_page
            await engine.fetch_previous_page()

        asyncio.run(run())
        assert [call.data for call in fake_transport.calls] == [{}, {"page": 2}, {"page": 1}]
        assert engine.current_page == 1
        assert engine.total_pages == 3

    def test_total_pages_uses_page_size_filter(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1, count=45))
        engine = _engine(fake_transport, fake_clock)
        engine.update_filters({"page_size": 10})
        asyncio.run(engine.fetch_list())
        assert engine.total_pages == 5

    def test_fetch_page_keeps_custom_endpoint(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/mine/", _page(1, count=50, next="https://api.test/things/mine/?page=2"))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list(endpoint="mine/")
            await engine.fetch_next_page()

        asyncio.run(run())
        assert [call.endpoint for call in fake_transport.calls] == ["/things/mine/", "/things/mine/"]


# ---------------------------------------------------------------------------
# fetch_by_id
# ---------------------------------------------------------------------------


class TestFetchById:
    def test_sets_focus_and_reconciles_list(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1, 2))
        fake_transport.respond("GET", "/things/2/", {"id": 2, "name": "fresh"})
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_list()
            await engine.fetch_by_id("2")

        asyncio.run(run())
        assert engine.focus == {"id": 2, "name": "fresh"}
        assert engine.items[1] == {"id": 2, "name": "fresh"}

    def test_bypasses_cache(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/3/", {"id": 3})
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_by_id(3)
            await engine.fetch_by_id(3)

        asyncio.run(run())
        assert len(fake_transport.calls) == 2

    def test_failure_clears_focus(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/3/", {"id": 3})
        fake_transport.fail("GET", "/things/3/", "Not found.", status=404)
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.fetch_by_id(3)
            assert await engine.fetch_by_id(3) is None

        asyncio.run(run())
        assert engine.focus is None
        assert engine.error == "Not found."


# ---------------------------------------------------------------------------
# Search state
# ---------------------------------------------------------------------------


class TestSearch:
    def test_debounced_search_sends_one_request(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(4))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            first = asyncio.ensure_future(engine.search("fl"))
            await asyncio.sleep(0)
            result = await engine.search("flat", {"city": "York"})
            assert result is not None
            assert await first is None

        asyncio.run(run())
        assert len(fake_transport.calls) == 1
        assert fake_transport.last_call.data == {"city": "York", "search": "flat"}
        assert engine.search_state.search_history == ("flat", "fl")

    def test_search_bypasses_cache(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(4))
        engine = _engine(fake_transport, fake_clock)

        async def run() -> None:
            await engine.search("flat")
            await engine.search("flat")

        asyncio.run(run())
        assert len(fake_transport.calls) == 2

    def test_search_state_does_not_fetch(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        engine = _engine(fake_transport, fake_clock)
        engine.set_search_query("x")
        engine.update_filters({"city": "York"})
        engine.clear_filter("city")
        engine.clear_all_filters()
        assert fake_transport.calls == []

    def test_has_active_filters(self, fake_clock: FrozenClock) -> None:
        engine = _engine(FakeTransport(), fake_clock)
        assert not engine.has_active_filters
        engine.update_filters({"city": "York"})
        assert engine.has_active_filters
        engine.clear_all_filters()
        assert not engine.has_active_filters

    def test_set_sorting_accepts_option(self, fake_clock: FrozenClock) -> None:
        engine = _engine(FakeTransport(), fake_clock)
        engine.set_sorting(engine.sort_options[0])
        assert engine.search_state.ordering == "-price"
        engine.set_sorting(None)
        assert engine.search_state.ordering is None

    def test_reset_search_state(self, fake_clock: FrozenClock) -> None:
        engine = _engine(FakeTransport(), fake_clock)
        engine.set_search_query("x")
        assert engine.reset_search_state().query == ""


# ---------------------------------------------------------------------------
# Observation
# ---------------------------------------------------------------------------


class TestSubscribe:
    def test_listener_sees_loading_then_result(self, fake_transport: FakeTransport, fake_clock: FrozenClock) -> None:
        fake_transport.respond("GET", "/things/", _page(1))
        engine = _engine(fake_transport, fake_clock)
        statuses: list[EngineStatus] = []
        engine.subscribe(lambda store: statuses.append(store.status))

        asyncio.run(engine.fetch_list())

        assert statuses[0] is EngineStatus.LOADING
        assert statuses[-1] is EngineStatus.SUCCESS

    def test_search_listener(self, fake_clock: FrozenClock) -> None:
        engine = _engine(FakeTransport(), fake_clock)
        queries: list[str] = []
        engine.subscribe_search(lambda state: queries.append(state.query))
        engine.set_search_query("loft")
        assert queries == ["loft"]
