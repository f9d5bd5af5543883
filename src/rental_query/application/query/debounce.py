"""Application query – Debouncer for search-as-you-type."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, TypeVar

from rental_query.observability.logging import get_logger

T = TypeVar("T")

__all__ = ["Debouncer"]

logger = get_logger(__name__)


class _Pending:
    __slots__ = ("task", "dispatched")

    def __init__(self) -> None:
        self.task: asyncio.Task | None = None
        self.dispatched = False


class Debouncer(Generic[T]):
    """Delays a call and lets a newer call replace a pending one.

    Only the timer is cancellable: once the wrapped coroutine has been
    started it runs to completion, and ordering between dispatched calls is
    the caller's concern. A superseded :meth:`run` resolves to ``None``.

    Example::

        debouncer = Debouncer(0.3)
        result = await debouncer.run(lambda: engine.fetch_list(use_cache=False))
    """

    def __init__(self, delay: float, *, name: str = "debounce") -> None:
        if delay < 0:
            raise ValueError("delay must not be negative")
        self._delay = delay
        self._name = name
        self._pending: _Pending | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a timer is waiting and has not dispatched yet."""
        return self._pending is not None and not self._pending.dispatched and not self._pending.task.done()

    def cancel(self) -> bool:
        """Cancel the pending timer, if any. Dispatched calls are left alone."""
        if not self.pending:
            return False
        self._pending.task.cancel()
        return True

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T | None:
        if self.cancel():
            logger.debug("debounce.superseded", debouncer=self._name)
        pending = _Pending()
        pending.task = asyncio.ensure_future(self._fire(pending, factory))
        self._pending = pending
        try:
            return await pending.task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if pending.task.cancelled() and (current is None or not current.cancelling()):
                return None
            raise

    async def _fire(self, pending: _Pending, factory: Callable[[], Awaitable[T]]) -> T:
        await asyncio.sleep(self._delay)
        pending.dispatched = True
        return await factory()
