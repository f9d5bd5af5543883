"""Resources – the five resource definitions and their default TTLs."""
from __future__ import annotations

from typing import Any, Mapping

from rental_query.application.query import ResourceDefinition, SortOption
from rental_query.resources.transforms import geojson_envelope

__all__ = [
    "DEFAULT_TTLS",
    "ENQUIRIES",
    "ENQUIRY_MESSAGES_TTL",
    "FAVOURITES",
    "PROPERTIES",
    "RESOURCES",
    "REVIEWS",
    "USERS",
    "favourite_property_id",
    "with_overrides",
]

MINUTE = 60.0

DEFAULT_TTLS: dict[str, float] = {
    "properties": 5 * MINUTE,
    "users": 5 * MINUTE,
    "enquiries": 2 * MINUTE,
    "enquiry_messages": 2 * MINUTE,
    "reviews": 3 * MINUTE,
    "favourites": 2 * MINUTE,
}

ENQUIRY_MESSAGES_TTL = DEFAULT_TTLS["enquiry_messages"]


def favourite_property_id(favourite: Any) -> Any:
    """A favourite is identified by the property it points at."""
    if isinstance(favourite, Mapping):
        prop = favourite.get("property")
        return prop.get("id") if isinstance(prop, Mapping) else prop
    return getattr(favourite, "property", None)


PROPERTIES = ResourceDefinition(
    name="properties",
    endpoint="/properties/",
    ttl=DEFAULT_TTLS["properties"],
    transform=geojson_envelope,
    sort_options=(
        SortOption("-created_at", "Newest", "desc"),
        SortOption("created_at", "Oldest", "asc"),
        SortOption("price", "Price: Low to High", "asc"),
        SortOption("-price", "Price: High to Low", "desc"),
    ),
)

USERS = ResourceDefinition(
    name="users",
    endpoint="/users/",
    ttl=DEFAULT_TTLS["users"],
    forced_filters={"roles": "student"},
    sort_options=(
        SortOption("-date_joined", "Newest First", "desc"),
        SortOption("date_joined", "Oldest First", "asc"),
        SortOption("first_name", "First Name: A to Z", "asc"),
        SortOption("-first_name", "First Name: Z to A", "desc"),
        SortOption("last_name", "Last Name: A to Z", "asc"),
        SortOption("-last_name", "Last Name: Z to A", "desc"),
        SortOption("username", "Username: A to Z", "asc"),
        SortOption("-username", "Username: Z to A", "desc"),
    ),
)

ENQUIRIES = ResourceDefinition(
    name="enquiries",
    endpoint="/messages/enquiries/",
    ttl=DEFAULT_TTLS["enquiries"],
    soft_delete={"status": "cancelled", "is_active": False},
    sort_options=(
        SortOption("-updated_at", "Most Recent", "desc"),
        SortOption("updated_at", "Oldest First", "asc"),
        SortOption("-created_at", "Newest First", "desc"),
        SortOption("created_at", "Earliest First", "asc"),
        SortOption("status", "Status", "asc"),
        SortOption("subject", "Subject A-Z", "asc"),
        SortOption("-subject", "Subject Z-A", "desc"),
    ),
)

REVIEWS = ResourceDefinition(
    name="reviews",
    endpoint="/property-reviews/",
    ttl=DEFAULT_TTLS["reviews"],
    sort_options=(
        SortOption("-created_at", "Newest First", "desc"),
        SortOption("created_at", "Oldest First", "asc"),
        SortOption("-rating", "Highest Rating", "desc"),
        SortOption("rating", "Lowest Rating", "asc"),
        SortOption("reviewer__username", "Reviewer A-Z", "asc"),
        SortOption("-reviewer__username", "Reviewer Z-A", "desc"),
    ),
)

FAVOURITES = ResourceDefinition(
    name="favourites",
    endpoint="/favourites/",
    ttl=DEFAULT_TTLS["favourites"],
    id_of=favourite_property_id,
)

RESOURCES: dict[str, ResourceDefinition] = {
    definition.name: definition
    for definition in (PROPERTIES, USERS, ENQUIRIES, REVIEWS, FAVOURITES)
}


def with_overrides(definition: ResourceDefinition, ttls: Mapping[str, float]) -> ResourceDefinition:
    """Apply a ``{resource name: seconds}`` TTL override, if one is present."""
    ttl = ttls.get(definition.name)
    return definition.with_ttl(ttl) if ttl is not None else definition
