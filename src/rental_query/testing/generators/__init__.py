"""Testing generators – property-based test data."""
from rental_query.testing.generators.strategies import (
    filter_name_strategy,
    filter_value_strategy,
    filters_strategy,
)

__all__ = ["filter_name_strategy", "filter_value_strategy", "filters_strategy"]
