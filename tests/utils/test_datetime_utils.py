"""
Tests for datetime utilities module.

Tests timezone handling, ISO serialization and age calculation.
"""
from datetime import date, datetime, timedelta, timezone

from app.utils.datetime_utils import calculate_age, ensure_utc, to_iso_utc, utc_now


class TestUtcNow:
    """Tests for utc_now() function."""

    def test_returns_timezone_aware_datetime(self):
        assert utc_now().tzinfo == timezone.utc

    def test_returns_current_time(self):
        before = datetime.now(timezone.utc)
        result = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= result <= after


class TestEnsureUtc:
    """Tests for ensure_utc() function."""

    def test_naive_datetime_is_assumed_utc(self):
        result = ensure_utc(datetime(2025, 12, 16, 11, 30))

        assert result == datetime(2025, 12, 16, 11, 30, tzinfo=timezone.utc)

    def test_aware_datetime_is_converted(self):
        lisbon_summer = timezone(timedelta(hours=1))

        result = ensure_utc(datetime(2025, 7, 1, 12, 0, tzinfo=lisbon_summer))

        assert result.tzinfo == timezone.utc
        assert result.hour == 11

    def test_none_passes_through(self):
        assert ensure_utc(None) is None


class TestToIsoUtc:
    """Tests for to_iso_utc() function."""

    def test_uses_z_suffix(self):
        dt = datetime(2025, 12, 16, 11, 30, 0, 123456, tzinfo=timezone.utc)

        assert to_iso_utc(dt) == "2025-12-16T11:30:00.123456Z"

    def test_naive_datetime(self):
        assert to_iso_utc(datetime(2025, 12, 16, 11, 30)) == "2025-12-16T11:30:00Z"

    def test_none(self):
        assert to_iso_utc(None) is None


class TestCalculateAge:
    """Tests for calculate_age() function."""

    def test_day_before_birthday(self):
        assert calculate_age(date(2000, 6, 15), today=date(2024, 6, 14)) == 23

    def test_on_birthday(self):
        assert calculate_age(date(2000, 6, 15), today=date(2024, 6, 15)) == 24

    def test_leap_day_birthday(self):
        assert calculate_age(date(2004, 2, 29), today=date(2022, 2, 28)) == 17
        assert calculate_age(date(2004, 2, 29), today=date(2022, 3, 1)) == 18
