"""Application query – ResourceQueryEngine.

One engine per resource type. It owns the resource's search state, query
cache, observable store and mutation coordinator, and turns the current
query intent into transport calls::

    engine = ResourceQueryEngine(PROPERTIES, transport, auth)
    engine.update_filters({"min_price": 50000, "property_type": ["apartment", "studio"]})
    page = await engine.fetch_list()
    if engine.can_fetch_next_page:
        await engine.fetch_next_page()

Every ``fetch_list`` takes a ticket from a monotonic counter; a response
is applied only while its ticket is still the newest, so an older request
that resolves late never overwrites a newer result. A response is also
dropped when a successful write cleared the cache while it was in flight,
so data read before the write is neither shown nor cached.
"""
from __future__ import annotations

import itertools
from typing import Any, Callable, Generic, Mapping, TypeVar

from rental_query.adapters.auth import AuthHeaderProvider
from rental_query.adapters.http import Transport, TransportResponse
from rental_query.application.cache import QueryCache
from rental_query.application.filters import Filters, normalize
from rental_query.application.mutations.coordinator import MutationCoordinator
from rental_query.application.pagination import (
    PAGE_PARAM,
    PaginatedResult,
    PaginationDescriptor,
    page_from_cursor,
    total_pages,
)
from rental_query.application.query.debounce import Debouncer
from rental_query.application.query.definition import ResourceDefinition, SortOption
from rental_query.application.query.gateway import ResourceGateway
from rental_query.application.query.state import EngineStatus, ResourceStore, StoreListener
from rental_query.application.search import SearchState, SearchStateManager
from rental_query.kernel.errors import EnvelopeError
from rental_query.kernel.time import Clock, SystemClock
from rental_query.observability.logging import get_logger

T = TypeVar("T")

__all__ = ["DEFAULT_DEBOUNCE_SECONDS", "DEFAULT_PAGE_SIZE", "ResourceQueryEngine"]

DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_PAGE_SIZE = 20
PAGE_SIZE_PARAM = "page_size"


class ResourceQueryEngine(Generic[T]):
    """Filter/sort/pagination-driven list queries with a TTL cache.

    Args:
        definition: Endpoint, TTL, transforms and forced filters.
        transport: Any :class:`~rental_query.adapters.http.Transport`.
        auth: Header provider attached to every call.
        clock: Time source for cache expiry.
        ttl: Overrides ``definition.ttl``.
        debounce_seconds: Delay applied by :meth:`search`.
        default_page_size: Used by :attr:`total_pages` when no
            ``page_size`` filter is set.
    """

    def __init__(
        self,
        definition: ResourceDefinition,
        transport: Transport,
        auth: AuthHeaderProvider | None = None,
        *,
        clock: Clock | None = None,
        ttl: float | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if ttl is not None:
            definition = definition.with_ttl(ttl)
        self._definition = definition
        self._clock: Clock = clock or SystemClock()
        self._gateway = ResourceGateway(definition, transport, auth)
        self._cache: QueryCache[T] = QueryCache(definition.ttl, self._clock)
        self._store: ResourceStore[T] = ResourceStore(definition.id_of)
        self._search = SearchStateManager()
        self._mutations: MutationCoordinator[T] = MutationCoordinator(self._gateway, self._store, self._cache)
        self._debouncer: Debouncer[PaginatedResult[T] | None] = Debouncer(
            debounce_seconds, name=f"{definition.name}.search"
        )
        self._default_page_size = default_page_size
        self._tickets = itertools.count(1)
        self._latest_ticket = 0
        self._current_page = 1
        self._page_size = default_page_size
        self._last_endpoint: str | None = None
        self._log = get_logger(__name__, resource=definition.name)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def definition(self) -> ResourceDefinition:
        return self._definition

    @property
    def items(self) -> tuple[T, ...]:
        return self._store.items

    @property
    def focus(self) -> T | None:
        return self._store.focus

    @property
    def pagination(self) -> PaginationDescriptor | None:
        return self._store.pagination

    @property
    def error(self) -> str | None:
        return self._store.error

    @property
    def status(self) -> EngineStatus:
        return self._store.status

    @property
    def loading(self) -> bool:
        return self._store.loading

    @property
    def search_state(self) -> SearchState:
        return self._search.state

    @property
    def cache(self) -> QueryCache[T]:
        return self._cache

    @property
    def sort_options(self) -> tuple[SortOption, ...]:
        return self._definition.sort_options

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Notify *listener* on every list/focus/pagination/error change."""
        return self._store.subscribe(listener)

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------

    @property
    def has_active_filters(self) -> bool:
        return self._search.state.has_active_filters

    @property
    def can_fetch_next_page(self) -> bool:
        pagination = self._store.pagination
        return pagination is not None and pagination.has_next

    @property
    def can_fetch_previous_page(self) -> bool:
        pagination = self._store.pagination
        return pagination is not None and pagination.has_previous

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        pagination = self._store.pagination
        if pagination is None:
            return 0
        return total_pages(pagination.count, self._page_size)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def fetch_list(
        self,
        override_filters: Mapping[str, Any] | None = None,
        use_cache: bool = True,
        *,
        endpoint: str | None = None,
    ) -> PaginatedResult[T] | None:
        """Fetch one page of the list for the current search state.

        *override_filters* win per key over the search state filters.
        *endpoint* is a sub-path of the resource endpoint (``"my-properties/"``).
        Returns ``None`` on failure, when a newer request superseded this
        one, or when a write landed while it was in flight.
        """
        ticket = self._take_ticket()
        generation = self._cache.generation
        filters = self.compose_filters(override_filters)
        path = self._definition.list_path(endpoint)
        signature = self._cache.signature(filters, path)
        log = self._log.bind(ticket=ticket, signature=signature, endpoint=path)
        self._last_endpoint = endpoint

        if use_cache:
            entry = self._cache.get(signature)
            if entry is not None:
                log.debug("query.cache_hit")
                result = PaginatedResult.of(entry.data, entry.pagination)
                self._store.begin()
                self._apply(result, filters)
                self._store.succeed()
                return result

        log.debug("query.fetch_started", use_cache=use_cache)
        self._store.begin()
        try:
            response = await self._gateway.get(path, filters)
        except BaseException:
            self._store.settle()
            raise

        if ticket != self._latest_ticket or generation != self._cache.generation:
            # superseded by a newer fetch, or a write cleared the cache meanwhile
            log.info(
                "query.stale_response_discarded",
                latest=self._latest_ticket,
                generation=generation,
                current_generation=self._cache.generation,
            )
            self._store.settle()
            return None

        if not response.success:
            message = response.error or f"Failed to fetch {self._definition.name}"
            log.warning("query.fetch_failed", status=response.status, error=message)
            self._store.clear_list()
            self._store.fail(message)
            return None

        try:
            result = self._definition.transform(response.data)
        except EnvelopeError as exc:
            log.warning("query.fetch_failed", status=response.status, error=exc.message)
            self._store.clear_list()
            self._store.fail(exc.message)
            return None

        self._cache.put(signature, result.items, result.pagination)
        self._apply(result, filters)
        self._store.succeed()
        return result

    async def fetch_page(self, page: int) -> PaginatedResult[T] | None:
        return await self.fetch_list({PAGE_PARAM: page}, endpoint=self._last_endpoint)

    async def fetch_next_page(self) -> PaginatedResult[T] | None:
        pagination = self._store.pagination
        if pagination is None or pagination.next is None:
            return None
        return await self.fetch_page(page_from_cursor(pagination.next) or self._current_page + 1)

    async def fetch_previous_page(self) -> PaginatedResult[T] | None:
        pagination = self._store.pagination
        if pagination is None or pagination.previous is None:
            return None
        return await self.fetch_page(page_from_cursor(pagination.previous) or 1)

    async def fetch_by_id(self, identifier: Any) -> T | None:
        """Fetch one item, bypassing the cache, and make it the focus."""
        path = self._definition.detail_path(identifier)
        self._store.begin()
        try:
            response = await self._gateway.get(path)
        except BaseException:
            self._store.settle()
            raise
        if not response.success:
            message = response.error or f"Failed to fetch {self._definition.name} {identifier}"
            self._log.warning("query.fetch_failed", endpoint=path, status=response.status, error=message)
            self._store.set_focus(None)
            self._store.fail(message)
            return None
        item = self._definition.detail_transform(response.data)
        self._store.set_focus(item)
        if self._store.find(identifier) is not None:
            self._store.replace(item, identifier=identifier)
        self._store.succeed()
        return item

    async def search(
        self,
        query: str,
        filters: Mapping[str, Any] | None = None,
    ) -> PaginatedResult[T] | None:
        """Debounced, cache-bypassing search-as-you-type.

        A newer call within the debounce window supersedes this one, which
        then resolves to ``None``.
        """
        self._search.set_query(query)
        if filters:
            self._search.update_filters(filters)
        return await self._debouncer.run(lambda: self.fetch_list(use_cache=False))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @property
    def mutations(self) -> MutationCoordinator[T]:
        return self._mutations

    async def create(self, data: Mapping[str, Any]) -> T | None:
        return await self._mutations.create(data)

    async def update(self, identifier: Any, data: Mapping[str, Any]) -> T | None:
        return await self._mutations.update(identifier, data)

    async def patch(self, identifier: Any, data: Mapping[str, Any]) -> T | None:
        return await self._mutations.patch(identifier, data)

    async def delete(self, identifier: Any) -> bool:
        return await self._mutations.delete(identifier)

    # ------------------------------------------------------------------
    # Search state
    # ------------------------------------------------------------------

    def set_search_query(self, query: str) -> SearchState:
        return self._search.set_query(query)

    def update_filters(self, partial: Mapping[str, Any]) -> SearchState:
        return self._search.update_filters(partial)

    def clear_filter(self, name: str) -> SearchState:
        return self._search.clear_filter(name)

    def clear_all_filters(self) -> SearchState:
        return self._search.clear_all_filters()

    def set_sorting(self, ordering: str | SortOption | None) -> SearchState:
        if isinstance(ordering, SortOption):
            ordering = ordering.value
        return self._search.set_sort(ordering)

    def subscribe_search(self, listener: Callable[[SearchState], None]) -> Callable[[], None]:
        return self._search.subscribe(listener)

    def compose_filters(self, override_filters: Mapping[str, Any] | None = None) -> Filters:
        """Search filters + overrides + query + forced filters, normalized."""
        merged: dict[str, Any] = dict(self._search.state.filters)
        merged.update(override_filters or {})
        query = self._search.state.query
        if query:
            merged[self._definition.search_param] = query
        merged.update(self._definition.forced_filters)
        return normalize(merged)

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def clear_error(self) -> None:
        self._store.clear_error()

    def clear_cache(self) -> int:
        return self._cache.clear()

    def reset(self) -> None:
        """Drop list, focus, pagination, error and cache; search state survives."""
        self._debouncer.cancel()
        self._take_ticket()
        self._cache.clear()
        self._store.reset()
        self._current_page = 1
        self._page_size = self._default_page_size

    def reset_search_state(self) -> SearchState:
        return self._search.reset()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _take_ticket(self) -> int:
        self._latest_ticket = next(self._tickets)
        return self._latest_ticket

    async def _read(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        failure: str,
    ) -> TransportResponse | None:
        """GET outside the list/focus flow (``me/``, category buckets ...).

        Errors land in ``error`` like any other fetch; nothing is cached.
        """
        self._store.begin()
        try:
            response = await self._gateway.get(path, params)
        except BaseException:
            self._store.settle()
            raise
        if not response.success:
            message = response.error or failure
            self._log.warning("query.fetch_failed", endpoint=path, status=response.status, error=message)
            self._store.fail(message)
            return None
        self._store.succeed()
        return response

    def _apply(self, result: PaginatedResult[T], filters: Mapping[str, Any]) -> None:
        self._current_page = _positive_int(filters.get(PAGE_PARAM), 1)
        self._page_size = _positive_int(filters.get(PAGE_SIZE_PARAM), self._default_page_size)
        self._store.replace_list(result.items, result.pagination)


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
