"""Tests for display-time formatting."""
from core.time_utils import format_local_date, format_local_datetime, parse_store_datetime


class TestFormatting:

    def test_store_timestamp_is_utc(self):
        dt = parse_store_datetime("2024-01-01 12:00:00")
        assert dt.utcoffset().total_seconds() == 0

    def test_datetime_in_display_timezone(self):
        assert format_local_datetime("2024-01-01 12:00:00", "Asia/Kolkata") == "01 Jan 2024, 05:30 PM"

    def test_date_in_display_timezone(self):
        assert format_local_date("2024-01-01", "Asia/Kolkata") == "01 Jan 2024"

    def test_unparsable_input_returned_unchanged(self):
        assert format_local_datetime("yesterday", "Asia/Kolkata") == "yesterday"
        assert format_local_date("", "Asia/Kolkata") == ""

    def test_unknown_timezone_returns_input(self):
        assert format_local_datetime("2024-01-01 12:00:00", "Mars/Olympus") == "2024-01-01 12:00:00"
