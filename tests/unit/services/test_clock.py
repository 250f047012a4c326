"""Unit tests for clock implementations"""

from datetime import date, datetime, timezone
from src.app.services.clock import FixedClock, SystemClock


class TestFixedClock:

    def test_naive_time_is_treated_as_utc(self):
        clock = FixedClock(datetime(2024, 1, 1, 23, 0))

        assert clock.now().tzinfo == timezone.utc
        assert clock.today() == date(2024, 1, 1)

    def test_advance_moves_forward(self):
        clock = FixedClock(datetime(2024, 1, 1, 23, 0, tzinfo=timezone.utc))

        clock.advance(hours=2)

        assert clock.today() == date(2024, 1, 2)


class TestSystemClock:

    def test_now_is_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None
