"""Testing fixtures – fake_transport."""
from __future__ import annotations

import pytest

from rental_query.testing.fakes import FakeTransport


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Pytest fixture: an empty FakeTransport; script it per test."""
    return FakeTransport()


__all__ = ["fake_transport"]
