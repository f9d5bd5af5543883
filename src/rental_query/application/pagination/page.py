"""Application pagination – PaginationDescriptor, PaginatedResult, cursor parsing."""
from __future__ import annotations

import dataclasses
import math
from typing import Any, Callable, Generic, TypeVar
from urllib.parse import parse_qs, urlsplit

T = TypeVar("T")

PAGE_PARAM = "page"


@dataclasses.dataclass(frozen=True)
class PaginationDescriptor:
    """``{count, next, previous}``; ``None`` cursor means no further page.

    Cursors are opaque tokens (the API sends full URLs).
    """

    count: int = 0
    next: str | None = None
    previous: str | None = None

    @property
    def has_next(self) -> bool:
        return self.next is not None

    @property
    def has_previous(self) -> bool:
        return self.previous is not None

    def with_count(self, count: int) -> "PaginationDescriptor":
        return dataclasses.replace(self, count=max(0, count))


@dataclasses.dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """Uniform page shape every envelope transform produces."""

    items: tuple[T, ...] = ()
    count: int = 0
    next: str | None = None
    previous: str | None = None

    @classmethod
    def of(cls, items: list[T] | tuple[T, ...], pagination: PaginationDescriptor | None = None) -> "PaginatedResult[T]":
        if pagination is None:
            pagination = PaginationDescriptor(count=len(items))
        return cls(
            items=tuple(items),
            count=pagination.count,
            next=pagination.next,
            previous=pagination.previous,
        )

    @property
    def pagination(self) -> PaginationDescriptor:
        return PaginationDescriptor(count=self.count, next=self.next, previous=self.previous)

    def map(self, fn: Callable[[T], Any]) -> "PaginatedResult[Any]":
        """Return a new result with each item transformed by *fn*."""
        return dataclasses.replace(self, items=tuple(fn(item) for item in self.items))


def page_from_cursor(cursor: str | int | None) -> int | None:
    """Extract the target page number from an opaque cursor.

    * ``None`` → ``None`` (no page in that direction)
    * a URL with ``?page=N`` → ``N``
    * a URL without ``page`` → ``1`` (the API omits ``page=1`` on ``previous``)
    * a bare integer or digit string → that integer
    """
    if cursor is None:
        return None
    if isinstance(cursor, int):
        return cursor
    text = cursor.strip()
    if text.isdigit():
        return int(text)
    values = parse_qs(urlsplit(text).query).get(PAGE_PARAM)
    if not values:
        return 1
    try:
        return max(1, int(values[0]))
    except ValueError:
        return 1


def total_pages(count: int, page_size: int) -> int:
    if count <= 0 or page_size <= 0:
        return 0
    return math.ceil(count / page_size)


__all__ = [
    "PAGE_PARAM",
    "PaginatedResult",
    "PaginationDescriptor",
    "page_from_cursor",
    "total_pages",
]
