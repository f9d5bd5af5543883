"""Application filters – flatten loosely-typed filter sets into query parameters.

Rules, applied in this order:

1. ``min_<x>`` / ``max_<x>`` scalars become ``<x>__gte`` / ``<x>__lte``.
2. A range mapping ``{"min": a, "max": b}`` under ``<x>`` becomes
   ``<x>__gte`` / ``<x>__lte`` and ``<x>`` is removed.
3. Sequences and sets are joined with ``,`` (sets are sorted first).
4. ``None``, empty and whitespace-only strings, and empty sequences are
   dropped.

The result is a new dict with sorted keys, so equal filter sets always
serialise to the same signature. ``normalize`` is idempotent.
"""
from __future__ import annotations

from typing import Any, Mapping

from rental_query.kernel.errors import FilterValidationError

__all__ = [
    "Filters",
    "MECHANISM_KEYS",
    "RANGE_BOUNDS",
    "active_filter_names",
    "is_empty",
    "normalize",
]

Filters = dict[str, Any]

# pagination/sort controls, never counted as user-facing filter intent
MECHANISM_KEYS: frozenset[str] = frozenset({"page", "page_size", "ordering"})

RANGE_BOUNDS: dict[str, str] = {"min": "gte", "max": "lte"}


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return all(is_empty(item) for item in value)
    return False


def _join(name: str, value: list[Any] | tuple[Any, ...] | set[Any] | frozenset[Any]) -> str:
    items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else list(value)
    parts: list[str] = []
    for item in items:
        if is_empty(item):
            continue
        if isinstance(item, (Mapping, list, tuple, set, frozenset)):
            raise FilterValidationError(name, value)
        parts.append(_scalar_text(item))
    return ",".join(parts)


def _scalar_text(item: Any) -> str:
    if isinstance(item, bool):
        return "true" if item else "false"
    return str(item).strip()


def _range_key(name: str) -> tuple[str, str] | None:
    """``min_price`` -> ``("price", "gte")``; ``None`` for ordinary names.

    Names that already carry a ``__`` lookup are left alone.
    """
    if "__" in name:
        return None
    for prefix, suffix in RANGE_BOUNDS.items():
        marker = f"{prefix}_"
        if name.startswith(marker) and len(name) > len(marker):
            return name[len(marker):], suffix
    return None


def _is_range(value: Any) -> bool:
    return isinstance(value, Mapping) and set(value) <= set(RANGE_BOUNDS)


def normalize(raw: Mapping[str, Any] | None) -> Filters:
    """Return the canonical form of *raw*; never mutates its input.

    Raises :class:`FilterValidationError` for nested mappings that are not
    ``{min, max}`` ranges and for sequences containing containers.
    """
    expanded: Filters = {}
    for name, value in (raw or {}).items():
        name = str(name)
        if _is_range(value):
            for bound, suffix in RANGE_BOUNDS.items():
                if not is_empty(value.get(bound)):
                    expanded[f"{name}__{suffix}"] = value[bound]
            continue
        if isinstance(value, Mapping):
            raise FilterValidationError(name, value)
        split = _range_key(name)
        if split is not None:
            field, suffix = split
            if not is_empty(value):
                expanded[f"{field}__{suffix}"] = value
            continue
        expanded.setdefault(name, value)

    cleaned: Filters = {}
    for name in sorted(expanded):
        value = expanded[name]
        if isinstance(value, (list, tuple, set, frozenset)):
            value = _join(name, value)
        elif isinstance(value, str):
            value = value.strip()
        if is_empty(value):
            continue
        cleaned[name] = value
    return cleaned


def active_filter_names(filters: Mapping[str, Any]) -> frozenset[str]:
    """Keys of *filters* that express user intent (mechanism keys excluded)."""
    return frozenset(name for name in filters if name not in MECHANISM_KEYS)
