"""Application filters – normalization of filter sets."""
from rental_query.application.filters.normalizer import (
    MECHANISM_KEYS,
    RANGE_BOUNDS,
    Filters,
    active_filter_names,
    is_empty,
    normalize,
)

__all__ = [
    "Filters",
    "MECHANISM_KEYS",
    "RANGE_BOUNDS",
    "active_filter_names",
    "is_empty",
    "normalize",
]
