"""Application search – SearchState value object and SearchStateManager."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Mapping

from rental_query.application.filters import (
    RANGE_BOUNDS,
    Filters,
    active_filter_names,
    is_empty,
    normalize,
)

__all__ = ["HISTORY_LIMIT", "SearchState", "SearchStateManager", "StateListener"]

HISTORY_LIMIT = 10
ORDERING_KEY = "ordering"

StateListener = Callable[["SearchState"], None]


@dataclasses.dataclass(frozen=True)
class SearchState:
    """Current query intent of one engine.

    ``filters`` is always in normalized form. ``search_history`` is
    most-recent-first.
    """

    query: str = ""
    filters: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    active_filter_names: frozenset[str] = frozenset()
    is_searching: bool = False
    search_history: tuple[str, ...] = ()

    @property
    def ordering(self) -> str | None:
        value = self.filters.get(ORDERING_KEY)
        return str(value) if value is not None else None

    @property
    def has_active_filters(self) -> bool:
        return bool(self.active_filter_names) or bool(self.query)


def _aliases(name: str) -> set[str]:
    """Normalized keys a raw filter name can produce.

    ``price`` may expand to ``price__gte``/``price__lte``; ``min_price``
    maps to ``price__gte``.
    """
    keys = {name}
    if "__" in name:
        return keys
    for prefix, suffix in RANGE_BOUNDS.items():
        keys.add(f"{name}__{suffix}")
        marker = f"{prefix}_"
        if name.startswith(marker) and len(name) > len(marker):
            keys.add(f"{name[len(marker):]}__{suffix}")
    return keys


class SearchStateManager:
    """Owns the :class:`SearchState` of one engine.

    Every mutating call replaces the state with a new frozen snapshot and
    notifies subscribers. ``active_filter_names`` is recomputed from the
    normalized filters on every change, so it always equals the filter
    keys minus ``page``, ``page_size`` and ``ordering``.
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self._history_limit = history_limit
        self._state = SearchState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SearchState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_query(self, query: str) -> SearchState:
        q = (query or "").strip()
        history = self._state.search_history
        if q and (not history or history[0] != q):
            history = (q, *(entry for entry in history if entry != q))[: self._history_limit]
        return self._replace(query=q, is_searching=bool(q), search_history=history)

    def update_filters(self, partial: Mapping[str, Any]) -> SearchState:
        """Merge *partial* into the current filters and re-normalize.

        A key in *partial* first clears everything it previously expanded
        to, so ``{"price": {"min": 10}}`` replaces a whole range and
        ``{"min_price": None}`` removes just ``price__gte``.
        """
        merged: Filters = dict(self._state.filters)
        for name in partial:
            for key in _aliases(str(name)):
                merged.pop(key, None)
        merged.update({str(name): value for name, value in partial.items()})
        return self._set_filters(normalize(merged))

    def clear_filter(self, name: str) -> SearchState:
        remaining = {
            key: value
            for key, value in self._state.filters.items()
            if key not in _aliases(name)
        }
        return self._set_filters(remaining)

    def clear_all_filters(self) -> SearchState:
        """Reset query and filters; search history survives."""
        return self._replace(
            query="",
            filters={},
            active_filter_names=frozenset(),
            is_searching=False,
        )

    def set_sort(self, ordering: str | None) -> SearchState:
        if is_empty(ordering):
            return self.clear_filter(ORDERING_KEY)
        return self.update_filters({ORDERING_KEY: ordering})

    def reset(self) -> SearchState:
        """Back to the construction-time state, history included."""
        self._state = SearchState()
        self._notify()
        return self._state

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _set_filters(self, filters: Filters) -> SearchState:
        return self._replace(filters=filters, active_filter_names=active_filter_names(filters))

    def _replace(self, **changes: Any) -> SearchState:
        self._state = dataclasses.replace(self._state, **changes)
        self._notify()
        return self._state

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)
