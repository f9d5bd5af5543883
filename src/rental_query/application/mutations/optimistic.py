"""Application mutations – OptimisticUpdate protocol and run_optimistic."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Generic, Protocol, TypeVar, runtime_checkable

from rental_query.adapters.http import TransportResponse
from rental_query.application.query.state import ResourceStore, StoreSnapshot, same_id

T = TypeVar("T")

__all__ = ["OptimisticUpdate", "StoreUpdate", "run_optimistic"]

Undo = Callable[[ResourceStore[T], StoreSnapshot[T]], Any]


@runtime_checkable
class OptimisticUpdate(Protocol):
    """A local change applied ahead of server confirmation.

    ``snapshot`` captures the state to restore, ``apply`` makes the change
    visible, then exactly one of ``commit`` (discard the snapshot) or
    ``rollback`` (revert the change) runs.
    """

    def snapshot(self) -> None: ...
    def apply(self) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class StoreUpdate(Generic[T]):
    """:class:`OptimisticUpdate` over a :class:`ResourceStore`.

    *mutate* receives the store and performs the local change. *undo*
    receives the store and the snapshot taken before *mutate*, and reverts
    only that change, so concurrent optimistic updates on the same store do
    not undo each other. Without *undo* a rollback restores the whole
    snapshot. :meth:`appending` and :meth:`removing` build the inverse for
    the common membership changes.
    """

    def __init__(
        self,
        store: ResourceStore[T],
        mutate: Callable[[ResourceStore[T]], Any],
        undo: Undo[T] | None = None,
    ) -> None:
        self._store = store
        self._mutate = mutate
        self._undo = undo
        self._saved: StoreSnapshot[T] | None = None

    @classmethod
    def appending(cls, store: ResourceStore[T], item: T) -> "StoreUpdate[T]":
        """Append *item*; rollback drops it again or puts back the copy it replaced."""
        identifier = store.id_of(item)

        def undo(current: ResourceStore[T], saved: StoreSnapshot[T]) -> None:
            previous = _held(current, saved, identifier)
            if previous is None:
                current.remove(identifier)
            else:
                current.replace(previous[1], identifier=identifier)

        return cls(store, lambda current: current.append(item), undo)

    @classmethod
    def removing(cls, store: ResourceStore[T], identifier: Any) -> "StoreUpdate[T]":
        """Remove *identifier*; rollback re-inserts it at its old position."""

        def undo(current: ResourceStore[T], saved: StoreSnapshot[T]) -> None:
            previous = _held(current, saved, identifier)
            if previous is not None:
                current.insert(*previous)
            focus = saved.focus
            if focus is not None and current.focus is None and same_id(current.id_of(focus), identifier):
                current.set_focus(focus)

        return cls(store, lambda current: current.remove(identifier), undo)

    @property
    def pending(self) -> bool:
        return self._saved is not None

    def snapshot(self) -> None:
        self._saved = self._store.snapshot()

    def apply(self) -> None:
        self._mutate(self._store)

    def commit(self) -> None:
        self._saved = None

    def rollback(self) -> None:
        if self._saved is None:
            return
        if self._undo is None:
            self._store.restore(self._saved)
        else:
            self._undo(self._store, self._saved)
        self._saved = None


def _held(store: ResourceStore[T], saved: StoreSnapshot[T], identifier: Any) -> tuple[int, T] | None:
    for index, item in enumerate(saved.items):
        if same_id(store.id_of(item), identifier):
            return index, item
    return None


async def run_optimistic(
    update: OptimisticUpdate,
    call: Callable[[], Awaitable[TransportResponse]],
) -> TransportResponse:
    """Snapshot, apply, await *call*, then commit or roll back.

    The local change is visible before the first suspension point. A
    failure envelope rolls back; so does an exception escaping *call*,
    which is then re-raised.
    """
    update.snapshot()
    update.apply()
    try:
        response = await call()
    except BaseException:
        update.rollback()
        raise
    if response.success:
        update.commit()
    else:
        update.rollback()
    return response
