"""
Unit tests for the UTC+8 timestamp and date range helpers.
"""

from datetime import date, datetime, timezone

import pytest

from memobbs.core import clock


class TestTimestamps:
    def test_format_converts_to_utc_plus_eight(self):
        moment = datetime(2024, 2, 29, 16, 0, 0, tzinfo=timezone.utc)
        assert clock.format_timestamp(moment) == "2024-03-01T00:00:00.000+08:00"

    def test_timestamps_have_fixed_width(self):
        assert len(clock.now_iso()) == clock.TIMESTAMP_LENGTH == 29

    def test_naive_datetime_is_rejected(self):
        with pytest.raises(ValueError):
            clock.format_timestamp(datetime(2024, 1, 1))


class TestDateParsing:
    def test_valid_date(self):
        assert clock.parse_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("value", ["2023-02-29", "2024-2-1", "2024/02/01", "yesterday", ""])
    def test_invalid_dates(self, value):
        with pytest.raises(ValueError):
            clock.parse_date(value)


class TestRanges:
    """Ranges are half-open ``[start, end)``"""

    def test_day_bounds_cross_month(self):
        assert clock.day_bounds(date(2024, 2, 29)) == ("2024-02-29", "2024-03-01")

    def test_month_bounds_december(self):
        assert clock.month_bounds(2023, 12) == ("2023-12-01", "2024-01-01")

    def test_month_days_leap_february(self):
        days = clock.month_days(2024, 2)
        assert len(days) == 29
        assert days[0] == "2024-02-01"
        assert days[-1] == "2024-02-29"

    def test_in_day_boundaries(self):
        assert clock.in_day("2024-02-29T00:00:00.000+08:00", "2024-02-29")
        assert clock.in_day("2024-02-29T23:59:59.999+08:00", "2024-02-29")
        assert not clock.in_day("2024-03-01T00:00:00.000+08:00", "2024-02-29")
        assert not clock.in_day("2024-02-28T23:59:59.999+08:00", "2024-02-29")
