"""Testing support – fakes, fixtures and Hypothesis strategies.

Import in your ``conftest.py``::

    pytest_plugins = ["rental_query.testing.fixtures"]
"""

from rental_query.testing.fakes import EPOCH, FakeClock, FakeTransport, RecordedCall
from rental_query.testing.generators import (
    filter_name_strategy,
    filter_value_strategy,
    filters_strategy,
)

__all__ = [
    "EPOCH",
    "FakeClock",
    "FakeTransport",
    "RecordedCall",
    "filter_name_strategy",
    "filter_value_strategy",
    "filters_strategy",
]
