"""Testing fakes – in-memory doubles for the clock and transport ports."""
from rental_query.kernel.time import FrozenClock
from rental_query.testing.fakes.clock import EPOCH, FakeClock
from rental_query.testing.fakes.transport import UNSCRIPTED, FakeTransport, RecordedCall

__all__ = [
    "EPOCH",
    "FakeClock",
    "FakeTransport",
    "FrozenClock",
    "RecordedCall",
    "UNSCRIPTED",
]
