"""Application query – ResourceDefinition and SortOption."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Literal, Mapping

from rental_query.application.query.envelope import (
    EnvelopeTransform,
    ItemTransform,
    identity,
    paginated_envelope,
)

__all__ = ["IdGetter", "ResourceDefinition", "SortOption", "item_id"]

IdGetter = Callable[[Any], Any]


def item_id(item: Any) -> Any:
    """``item["id"]`` for mappings, ``item.id`` otherwise."""
    if isinstance(item, Mapping):
        return item.get("id")
    return getattr(item, "id", None)


@dataclasses.dataclass(frozen=True)
class SortOption:
    """One entry of a resource's sort menu; ``value`` is the ``ordering`` param."""

    value: str
    label: str
    direction: Literal["asc", "desc"] = "asc"


@dataclasses.dataclass(frozen=True)
class ResourceDefinition:
    """Everything that distinguishes one resource engine from another.

    Attributes:
        name: Short resource name, used in logs and TTL overrides.
        endpoint: List endpoint relative to the API base URL, e.g. ``/properties/``.
        ttl: Cache time-to-live in seconds.
        transform: Raw list payload -> :class:`PaginatedResult`.
        detail_transform: Raw detail payload -> item.
        id_of: Extracts the identifier of an item.
        forced_filters: Filters merged last into every list request.
        soft_delete: Field overrides applied instead of removal on delete.
        sort_options: Sort menu offered to callers.
        search_param: Filter name the search query is injected under.
    """

    name: str
    endpoint: str
    ttl: float
    transform: EnvelopeTransform = paginated_envelope
    detail_transform: ItemTransform = identity
    id_of: IdGetter = item_id
    forced_filters: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    soft_delete: Mapping[str, Any] | None = None
    sort_options: tuple[SortOption, ...] = ()
    search_param: str = "search"

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ResourceDefinition requires a name")
        if self.ttl <= 0:
            raise ValueError(f"ttl for {self.name!r} must be positive")
        object.__setattr__(self, "endpoint", "/" + self.endpoint.strip("/") + "/")

    def list_path(self, sub: str | None = None) -> str:
        if not sub:
            return self.endpoint
        return f"{self.endpoint}{sub.strip('/')}/"

    def detail_path(self, identifier: Any, action: str | None = None) -> str:
        path = f"{self.endpoint}{identifier}/"
        return f"{path}{action.strip('/')}/" if action else path

    def with_ttl(self, ttl: float) -> "ResourceDefinition":
        return dataclasses.replace(self, ttl=ttl)
