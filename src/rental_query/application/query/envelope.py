"""Application query – the generic backend envelope transform.

``{count, next, previous, results}`` is the shape every list endpoint of
the API shares; a bare JSON array is accepted too (some endpoints skip
pagination). Resource-specific transforms build on :func:`paginated_envelope`.
"""
from __future__ import annotations

from typing import Any, Callable, Mapping

from rental_query.application.pagination import PaginatedResult, PaginationDescriptor
from rental_query.kernel.errors import EnvelopeError

__all__ = ["EnvelopeTransform", "ItemTransform", "identity", "paginated_envelope", "split_envelope"]

EnvelopeTransform = Callable[[Any], PaginatedResult[Any]]
ItemTransform = Callable[[Any], Any]


def identity(item: Any) -> Any:
    return item


def _count(value: Any, results: Any) -> int:
    if value is None:
        return len(results) if isinstance(results, (list, tuple)) else 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def split_envelope(payload: Any) -> tuple[Any, PaginationDescriptor | None]:
    """Return ``(results, pagination)``; pagination is ``None`` for bare arrays."""
    if isinstance(payload, (list, tuple)):
        return payload, None
    if not isinstance(payload, Mapping):
        raise EnvelopeError(f"expected an object or array, got {type(payload).__name__}")
    if "results" not in payload:
        raise EnvelopeError("missing 'results'")
    results = payload["results"]
    count = payload.get("count")
    pagination = PaginationDescriptor(
        count=_count(count, results),
        next=payload.get("next"),
        previous=payload.get("previous"),
    )
    return results, pagination


def paginated_envelope(payload: Any, item: ItemTransform = identity) -> PaginatedResult[Any]:
    results, pagination = split_envelope(payload)
    if not isinstance(results, (list, tuple)):
        raise EnvelopeError(f"'results' is {type(results).__name__}, expected an array")
    items = [item(entry) for entry in results]
    return PaginatedResult.of(items, pagination)
