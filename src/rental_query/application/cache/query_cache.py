"""Application cache – QueryCache with TTL validity and wholesale invalidation."""
from __future__ import annotations

import dataclasses
from typing import Any, Generic, Iterator, Mapping, TypeVar

from rental_query.application.cache.keys import canonical_signature
from rental_query.application.pagination import PaginationDescriptor
from rental_query.kernel.time import Clock, SystemClock

T = TypeVar("T")

__all__ = ["CacheEntry", "QueryCache"]


@dataclasses.dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """One memoized list result.

    ``pagination`` is the descriptor seen when the entry was fetched, so a
    hit can restore real cursors instead of an empty page.
    """

    key: str
    data: tuple[T, ...]
    timestamp: float
    pagination: PaginationDescriptor | None = None


class QueryCache(Generic[T]):
    """Keyed store of list results, owned by exactly one engine.

    Best effort: a stale entry is never returned and behaves like a miss.
    Entries are not evicted by size; :meth:`clear` drops everything after a
    mutation and advances :attr:`generation`, so a fetch started before the
    clear can tell that its result predates the write.
    """

    def __init__(self, ttl: float, clock: Clock | None = None) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._clock: Clock = clock or SystemClock()
        self._entries: dict[str, CacheEntry[T]] = {}
        self._generation = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def generation(self) -> int:
        return self._generation

    @staticmethod
    def signature(filters: Mapping[str, Any], namespace: str = "") -> str:
        return canonical_signature(filters, namespace)

    def is_valid(self, entry: CacheEntry[T]) -> bool:
        return self._clock.timestamp() - entry.timestamp < self._ttl

    def get(self, signature: str) -> CacheEntry[T] | None:
        """Return the entry for *signature* only while it is still valid."""
        entry = self._entries.get(signature)
        if entry is None or not self.is_valid(entry):
            return None
        return entry

    def put(
        self,
        signature: str,
        data: list[T] | tuple[T, ...],
        pagination: PaginationDescriptor | None = None,
    ) -> CacheEntry[T]:
        entry = CacheEntry(
            key=signature,
            data=tuple(data),
            timestamp=self._clock.timestamp(),
            pagination=pagination,
        )
        self._entries[signature] = entry
        return entry

    def invalidate(self, signature: str) -> bool:
        return self._entries.pop(signature, None) is not None

    def clear(self) -> int:
        removed = len(self._entries)
        self._entries.clear()
        self._generation += 1
        return removed

    def purge_expired(self) -> int:
        stale = [key for key, entry in self._entries.items() if not self.is_valid(entry)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, signature: object) -> bool:
        return isinstance(signature, str) and self.get(signature) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
