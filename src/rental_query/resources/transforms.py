"""Resources – backend envelope transforms specific to one resource.

The properties API wraps its results in a GeoJSON feature collection::

    {"count": 2, "next": null, "previous": null,
     "results": {"type": "FeatureCollection", "features": [...]}}

List transforms here return the uniform :class:`PaginatedResult`.
"""
from __future__ import annotations

from typing import Any, Mapping

from rental_query.application.pagination import PaginatedResult
from rental_query.application.query import split_envelope
from rental_query.kernel.errors import EnvelopeError

__all__ = [
    "MARKETING_CATEGORIES",
    "feature_list",
    "geojson_envelope",
    "marketing_categories",
]

MARKETING_CATEGORIES: tuple[str, ...] = (
    "popular",
    "near_university",
    "top_rated",
    "special_needs",
    "cheap",
)


def feature_list(collection: Any) -> list[Any]:
    """Features of a FeatureCollection; a plain array passes through."""
    if isinstance(collection, (list, tuple)):
        return list(collection)
    if isinstance(collection, Mapping):
        features = collection.get("features", [])
        if isinstance(features, (list, tuple)):
            return list(features)
        raise EnvelopeError("'features' is not an array", resource="properties")
    raise EnvelopeError(
        f"expected a feature collection, got {type(collection).__name__}",
        resource="properties",
    )


def geojson_envelope(payload: Any) -> PaginatedResult[Any]:
    """Paginated (or bare) feature collection -> one page of features."""
    if isinstance(payload, Mapping) and "features" in payload and "results" not in payload:
        return PaginatedResult.of(feature_list(payload))
    results, pagination = split_envelope(payload)
    return PaginatedResult.of(feature_list(results), pagination)


def marketing_categories(payload: Any) -> dict[str, tuple[Any, ...]]:
    """``{category: FeatureCollection}`` -> ``{category: features}``.

    Known categories missing from the payload come back empty; unknown
    ones are kept.
    """
    if not isinstance(payload, Mapping):
        raise EnvelopeError("expected an object of categories", resource="marketing categories")
    categories = {name: () for name in MARKETING_CATEGORIES}
    for name, collection in payload.items():
        categories[str(name)] = tuple(feature_list(collection or []))
    return categories
