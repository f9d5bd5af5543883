"""Application search – query, filter, sort and history state."""
from rental_query.application.search.state import (
    HISTORY_LIMIT,
    SearchState,
    SearchStateManager,
    StateListener,
)

__all__ = ["HISTORY_LIMIT", "SearchState", "SearchStateManager", "StateListener"]
