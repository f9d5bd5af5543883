"""Unit tests for kernel time (Clock implementations)."""

from __future__ import annotations

from datetime import UTC, datetime

from rental_query.kernel.time import FrozenClock, SystemClock


class TestSystemClock:
    def test_now_is_utc_aware(self) -> None:
        assert SystemClock().now().tzinfo is not None

    def test_timestamp_tracks_now(self) -> None:
        clock = SystemClock()
        assert abs(clock.timestamp() - clock.now().timestamp()) < 5


class TestFrozenClock:
    def test_returns_fixed_instant(self) -> None:
        fixed = datetime(2026, 3, 1, tzinfo=UTC)
        clock = FrozenClock(fixed)
        assert clock.now() == fixed
        assert clock.timestamp() == fixed.timestamp()

    def test_advance_moves_timestamp(self) -> None:
        clock = FrozenClock(datetime(2026, 3, 1, tzinfo=UTC))
        before = clock.timestamp()
        clock.advance(seconds=90)
        assert clock.timestamp() - before == 90
