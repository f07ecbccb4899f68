"""Tests for datetime utilities."""

from datetime import datetime, timezone

from cybersec_monitor.utils.datetime import format_iso, parse_iso, to_millis, utc_now


class TestUtcNow:
    def test_is_timezone_aware(self):
        now = utc_now()
        assert now.tzinfo is not None
        assert now.utcoffset().total_seconds() == 0


class TestIsoRoundTrip:
    def test_format_then_parse(self):
        known = datetime(2024, 6, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)
        text = format_iso(known)

        assert text == "2024-06-15T10:30:00.123000+00:00"
        assert parse_iso(text) == known

    def test_format_defaults_to_now(self):
        assert parse_iso(format_iso()).tzinfo is not None

    def test_parse_empty_returns_none(self):
        assert parse_iso(None) is None
        assert parse_iso("") is None


class TestToMillis:
    def test_known_timestamp(self):
        # 2024-01-15 12:00:00 UTC = 1705320000000 ms
        known = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        assert to_millis(known) == 1705320000000
