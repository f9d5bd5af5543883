"""Application query – EngineStatus and the observable ResourceStore."""
from __future__ import annotations

import dataclasses
import enum
from typing import Any, Callable, Generic, Mapping, TypeVar

from rental_query.application.pagination import PaginationDescriptor
from rental_query.application.query.definition import IdGetter, item_id

T = TypeVar("T")

__all__ = ["EngineStatus", "ResourceStore", "StoreListener", "StoreSnapshot", "same_id"]


class EngineStatus(enum.Enum):
    """Lifecycle of one engine instance."""

    IDLE = "IDLE"
    """Nothing has run yet (or the engine was reset)."""

    LOADING = "LOADING"
    """At least one fetch or mutation is in flight."""

    SUCCESS = "SUCCESS"
    """The last operation to settle succeeded."""

    ERROR = "ERROR"
    """The last operation to settle failed; ``error`` holds the message."""


StoreListener = Callable[["ResourceStore[Any]"], None]


@dataclasses.dataclass(frozen=True)
class StoreSnapshot(Generic[T]):
    items: tuple[T, ...]
    focus: T | None
    pagination: PaginationDescriptor | None


class ResourceStore(Generic[T]):
    """List, focus, pagination and error state of one resource.

    Calls race freely, so ``loading`` is driven by an in-flight counter:
    :attr:`status` reports ``LOADING`` while any operation is pending and
    the outcome of the last settled operation otherwise.
    """

    def __init__(self, id_of: IdGetter = item_id) -> None:
        self._id_of = id_of
        self._items: list[T] = []
        self._focus: T | None = None
        self._pagination: PaginationDescriptor | None = None
        self._error: str | None = None
        self._outcome = EngineStatus.IDLE
        self._in_flight = 0
        self._listeners: list[StoreListener] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._items)

    @property
    def focus(self) -> T | None:
        return self._focus

    @property
    def pagination(self) -> PaginationDescriptor | None:
        return self._pagination

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def status(self) -> EngineStatus:
        return EngineStatus.LOADING if self._in_flight else self._outcome

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def id_of(self, item: T) -> Any:
        return self._id_of(item)

    def find(self, identifier: Any) -> T | None:
        for item in self._items:
            if same_id(self._id_of(item), identifier):
                return item
        return None

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def begin(self) -> None:
        self._in_flight += 1
        self._error = None
        self._notify()

    def settle(self) -> None:
        """Leave ``LOADING`` without recording an outcome (stale responses)."""
        self._in_flight = max(0, self._in_flight - 1)
        self._notify()

    def succeed(self) -> None:
        self._outcome = EngineStatus.SUCCESS
        self.settle()

    def fail(self, message: str) -> None:
        self._error = message
        self._outcome = EngineStatus.ERROR
        self.settle()

    def set_error(self, message: str | None) -> None:
        self._error = message
        if message is not None:
            self._outcome = EngineStatus.ERROR
        self._notify()

    def clear_error(self) -> None:
        self._error = None
        if self._outcome is EngineStatus.ERROR:
            self._outcome = EngineStatus.IDLE
        self._notify()

    def reset(self) -> None:
        self._items = []
        self._focus = None
        self._pagination = None
        self._error = None
        self._outcome = EngineStatus.IDLE
        self._notify()

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def replace_list(self, items: tuple[T, ...] | list[T], pagination: PaginationDescriptor | None) -> None:
        """Install a fetched page; a fresher copy of the focus is adopted."""
        self._items = list(items)
        self._pagination = pagination
        if self._focus is not None:
            fresher = self.find(self._id_of(self._focus))
            if fresher is not None:
                self._focus = fresher
        self._notify()

    def clear_list(self) -> None:
        self._items = []
        self._pagination = None
        self._notify()

    def set_focus(self, item: T | None) -> None:
        self._focus = item
        self._notify()

    def prepend(self, item: T) -> None:
        self._insert(item, first=True)

    def append(self, item: T) -> None:
        self._insert(item, first=False)

    def insert(self, index: int, item: T) -> bool:
        """Put *item* back at *index* unless its id is already held; bumps ``count``."""
        if self.find(self._id_of(item)) is not None:
            return False
        self._items.insert(min(max(index, 0), len(self._items)), item)
        if self._pagination is not None:
            self._pagination = self._pagination.with_count(self._pagination.count + 1)
        self._notify()
        return True

    def _insert(self, item: T, *, first: bool) -> None:
        """Add *item*, dropping any held copy with the same id; bumps ``count``."""
        identifier = self._id_of(item)
        existed = identifier is not None and self.find(identifier) is not None
        others = [i for i in self._items if not same_id(self._id_of(i), identifier)]
        self._items = [item, *others] if first else [*others, item]
        if self._pagination is not None and not existed:
            self._pagination = self._pagination.with_count(self._pagination.count + 1)
        self._notify()

    def replace(self, item: T, *, identifier: Any = None, merge: bool = False) -> T:
        """Swap the held copies of *item* (list entry and focus) by id.

        *identifier* defaults to the id of *item*. With ``merge`` the fields
        of *item* are laid over the held mapping. Returns the stored value.
        """
        if identifier is None:
            identifier = self._id_of(item)
        stored = item
        updated: list[T] = []
        for held in self._items:
            if same_id(self._id_of(held), identifier):
                stored = _merged(held, item) if merge else item
                updated.append(stored)
            else:
                updated.append(held)
        self._items = updated
        if self._focus is not None and same_id(self._id_of(self._focus), identifier):
            stored = _merged(self._focus, item) if merge else item
            self._focus = stored
        self._notify()
        return stored

    def update(self, identifier: Any, fn: Callable[[T], T]) -> T | None:
        """Apply *fn* to every held copy (list entry and focus) of *identifier*.

        Returns the last updated copy, ``None`` when nothing was held.
        """
        result: T | None = None
        updated: list[T] = []
        for held in self._items:
            if same_id(self._id_of(held), identifier):
                held = result = fn(held)
            updated.append(held)
        self._items = updated
        if self._focus is not None and same_id(self._id_of(self._focus), identifier):
            self._focus = result = fn(self._focus)
        self._notify()
        return result

    def remove(self, identifier: Any) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if not same_id(self._id_of(item), identifier)]
        removed = len(self._items) != before
        if removed and self._pagination is not None:
            self._pagination = self._pagination.with_count(self._pagination.count - 1)
        if self._focus is not None and same_id(self._id_of(self._focus), identifier):
            self._focus = None
        self._notify()
        return removed

    def snapshot(self) -> StoreSnapshot[T]:
        return StoreSnapshot(items=tuple(self._items), focus=self._focus, pagination=self._pagination)

    def restore(self, snapshot: StoreSnapshot[T]) -> None:
        self._items = list(snapshot.items)
        self._focus = snapshot.focus
        self._pagination = snapshot.pagination
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


def _merged(held: Any, incoming: Any) -> Any:
    if isinstance(held, Mapping) and isinstance(incoming, Mapping):
        return {**held, **incoming}
    return incoming


def same_id(left: Any, right: Any) -> bool:
    """Ids compare loosely: the API sends ints, callers often pass strings."""
    if left is None or right is None:
        return False
    return left == right or str(left) == str(right)
