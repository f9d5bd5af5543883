"""Resources – the five resource engines, their definitions and transforms."""
from rental_query.resources.client import RentalQueryClient, build_client
from rental_query.resources.definitions import (
    DEFAULT_TTLS,
    ENQUIRIES,
    FAVOURITES,
    PROPERTIES,
    RESOURCES,
    REVIEWS,
    USERS,
)
from rental_query.resources.enquiries import EnquiryClient, EnquiryStatus
from rental_query.resources.favourites import LOGIN_REQUIRED, FavouriteSet
from rental_query.resources.properties import PropertyClient
from rental_query.resources.reviews import ReviewClient, ReviewStats, review_stats
from rental_query.resources.transforms import geojson_envelope, marketing_categories
from rental_query.resources.users import UserClient

__all__ = [
    "DEFAULT_TTLS",
    "ENQUIRIES",
    "FAVOURITES",
    "LOGIN_REQUIRED",
    "PROPERTIES",
    "RESOURCES",
    "REVIEWS",
    "USERS",
    "EnquiryClient",
    "EnquiryStatus",
    "FavouriteSet",
    "PropertyClient",
    "RentalQueryClient",
    "ReviewClient",
    "ReviewStats",
    "UserClient",
    "build_client",
    "geojson_envelope",
    "marketing_categories",
    "review_stats",
]
