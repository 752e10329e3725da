"""Tests for whole-day date arithmetic."""

from datetime import date

import pytest

from paveplan.exceptions import InvalidIntervalError
from paveplan.scheduler.dates import (
    days_between,
    parse_date,
    pixels_to_days,
    round_half_up,
    shift,
    shift_interval,
    validate_interval,
)


class TestIntervals:
    """Test interval arithmetic and validation."""

    def test_days_between_is_signed(self) -> None:
        """Later-to-earlier gives a negative count."""
        assert days_between(date(2025, 1, 1), date(2025, 1, 11)) == 10
        assert days_between(date(2025, 1, 11), date(2025, 1, 1)) == -10

    def test_shift_crosses_month_boundary(self) -> None:
        """Shifting handles month and year rollovers."""
        assert shift(date(2025, 1, 30), 3) == date(2025, 2, 2)
        assert shift(date(2025, 1, 1), -1) == date(2024, 12, 31)

    def test_shift_interval_keeps_duration(self) -> None:
        """Both ends move by the same amount."""
        start, end = shift_interval(date(2025, 3, 1), date(2025, 3, 4), 5)
        assert (start, end) == (date(2025, 3, 6), date(2025, 3, 9))

    def test_zero_duration_interval_is_valid(self) -> None:
        """start == end is allowed."""
        validate_interval(date(2025, 1, 1), date(2025, 1, 1))

    def test_end_before_start_rejected(self) -> None:
        """Backwards intervals raise with both dates in the message."""
        with pytest.raises(InvalidIntervalError, match="2025-01-01"):
            validate_interval(date(2025, 1, 5), date(2025, 1, 1), what="Task 7")

    def test_missing_date_rejected(self) -> None:
        """A missing end is an error, not a zero-length task."""
        with pytest.raises(InvalidIntervalError, match="start and an end"):
            validate_interval(date(2025, 1, 5), None)


class TestParseDate:
    """Test lenient date parsing."""

    def test_parse_iso_string(self) -> None:
        assert parse_date(" 2025-06-30 ") == date(2025, 6, 30)

    def test_date_passes_through(self) -> None:
        assert parse_date(date(2025, 6, 30)) == date(2025, 6, 30)

    def test_garbage_is_none(self) -> None:
        assert parse_date("June 30") is None
        assert parse_date(None) is None


class TestPixelConversion:
    """Test pointer displacement to days."""

    def test_round_half_up_matches_browser(self) -> None:
        """Halves round toward positive infinity, unlike round()."""
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(0.49) == 0
        assert round_half_up(-0.51) == -1

    def test_pixels_to_days(self) -> None:
        """Displacement is divided by the scale then rounded."""
        assert pixels_to_days(100.0, 40.0) == 3  # 2.5 days
        assert pixels_to_days(-59.0, 40.0) == -1
        assert pixels_to_days(19.0, 40.0) == 0

    def test_non_positive_scale_rejected(self) -> None:
        with pytest.raises(ValueError, match="pixels_per_day"):
            pixels_to_days(10.0, 0.0)
