"""Testing fixtures – pytest fixtures for fake doubles."""
from rental_query.testing.fixtures.clock import fake_clock
from rental_query.testing.fixtures.transport import fake_transport

__all__ = ["fake_clock", "fake_transport"]
