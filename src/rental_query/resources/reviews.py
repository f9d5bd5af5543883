"""Resources – ReviewClient and review statistics."""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping

from rental_query.application.pagination import PaginatedResult
from rental_query.application.query import same_id
from rental_query.application.query.engine import ResourceQueryEngine

__all__ = ["RATINGS", "ReviewClient", "ReviewStats", "review_stats"]

RATINGS = (1, 2, 3, 4, 5)
USER_REVIEWS = "user-reviews"

Review = dict[str, Any]


@dataclasses.dataclass(frozen=True)
class ReviewStats:
    total_reviews: int
    average_rating: float
    rating_distribution: Mapping[int, int]


def review_stats(reviews: Iterable[Mapping[str, Any]]) -> ReviewStats:
    """Count, one-decimal average and 1–5 distribution of *reviews*.

    Ratings outside 1–5 count towards the total and average but not the
    distribution.
    """
    distribution = {rating: 0 for rating in RATINGS}
    ratings: list[float] = []
    for review in reviews:
        try:
            rating = float(review.get("rating"))
        except (TypeError, ValueError):
            continue
        ratings.append(rating)
        if rating.is_integer() and int(rating) in distribution:
            distribution[int(rating)] += 1
    if not ratings:
        return ReviewStats(total_reviews=0, average_rating=0.0, rating_distribution=distribution)
    return ReviewStats(
        total_reviews=len(ratings),
        average_rating=round(sum(ratings) / len(ratings), 1),
        rating_distribution=distribution,
    )


def _reviewer_id(review: Mapping[str, Any]) -> Any:
    reviewer = review.get("reviewer")
    return reviewer.get("id") if isinstance(reviewer, Mapping) else reviewer


def _property_id(review: Mapping[str, Any]) -> Any:
    prop = review.get("property")
    return prop.get("id") if isinstance(prop, Mapping) else prop


class ReviewClient(ResourceQueryEngine[Review]):
    """Property reviews."""

    async def fetch_property_reviews(
        self,
        property_id: Any,
        filters: Mapping[str, Any] | None = None,
    ) -> PaginatedResult[Review] | None:
        return await self.fetch_list({**(filters or {}), "property": property_id})

    async def fetch_user_reviews(self, user_id: Any) -> PaginatedResult[Review] | None:
        """Reviews written by *user_id* (the endpoint returns a bare array)."""
        return await self.fetch_list(endpoint=f"{USER_REVIEWS}/{user_id}/")

    @property
    def stats(self) -> ReviewStats:
        """Statistics over the currently held reviews."""
        return review_stats(self.items)

    def user_review_for_property(self, user_id: Any, property_id: Any) -> Review | None:
        for review in self.items:
            if same_id(_property_id(review), property_id) and same_id(_reviewer_id(review), user_id):
                return review
        return None

    def has_user_reviewed_property(self, user_id: Any, property_id: Any) -> bool:
        return self.user_review_for_property(user_id, property_id) is not None
