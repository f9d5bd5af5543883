"""Resources – PropertyClient."""
from __future__ import annotations

from typing import Any

from rental_query.application.pagination import PaginatedResult
from rental_query.application.query.engine import ResourceQueryEngine
from rental_query.kernel.errors import EnvelopeError
from rental_query.resources.transforms import marketing_categories

__all__ = ["PropertyClient"]

NEAR_UNIVERSITY = "near-university/"
MY_PROPERTIES = "my-properties/"
MARKETING_CATEGORIES = "marketing-categories/"

Property = dict[str, Any]


class PropertyClient(ResourceQueryEngine[Property]):
    """Property search; list payloads are GeoJSON feature collections."""

    async def fetch_near_university(self, distance: float | None = None) -> PaginatedResult[Property] | None:
        overrides = {"distance": distance} if distance is not None else None
        return await self.fetch_list(overrides, endpoint=NEAR_UNIVERSITY)

    async def fetch_my_properties(self) -> PaginatedResult[Property] | None:
        """Listings owned by the signed-in user."""
        return await self.fetch_list(endpoint=MY_PROPERTIES)

    async def fetch_marketing_categories(
        self,
        limit: int | None = None,
        distance: float | None = None,
    ) -> dict[str, tuple[Property, ...]] | None:
        """Curated landing-page buckets (``popular``, ``cheap`` ...).

        Not cached and not part of the held list.
        """
        params = {name: value for name, value in (("limit", limit), ("distance", distance)) if value is not None}
        response = await self._read(
            self.definition.list_path(MARKETING_CATEGORIES),
            params,
            failure="Failed to fetch marketing categories",
        )
        if response is None:
            return None
        try:
            return marketing_categories(response.data)
        except EnvelopeError as exc:
            self._log.warning("query.fetch_failed", endpoint=MARKETING_CATEGORIES, error=exc.message)
            self._store.set_error(exc.message)
            return None
