"""Tests for app.utils.timezones."""

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

import pytest

from app.utils.timezones import (
    SUPPORTED_TIMEZONES,
    TIMEZONE_LABELS,
    ensure_utc,
    format_time_label,
    get_zone,
    is_valid_timezone,
    local_to_utc,
    map_to_supported_timezone,
    today_in,
)


class TestSupportedTimezones:

    def test_every_supported_zone_has_a_label_and_loads(self):
        assert len(SUPPORTED_TIMEZONES) == 20
        for name in SUPPORTED_TIMEZONES:
            assert name in TIMEZONE_LABELS
            get_zone(name)

    @pytest.mark.parametrize("name,expected", [
        ("America/New_York", "America/New_York"),
        ("US/Eastern", "America/New_York"),
        ("Asia/Calcutta", "Asia/Kolkata"),
        ("UTC", "Etc/UTC"),
        ("Asia/Kathmandu", "Etc/UTC"),
        (None, "Etc/UTC"),
    ])
    def test_map_to_supported_timezone(self, name, expected):
        assert map_to_supported_timezone(name) == expected


class TestConversions:

    def test_get_zone_rejects_unknown(self):
        with pytest.raises(ValueError):
            get_zone("Not/AZone")
        assert not is_valid_timezone("Not/AZone")
        assert not is_valid_timezone("")
        assert is_valid_timezone("Europe/Berlin")

    def test_ensure_utc(self):
        naive = datetime(2030, 1, 7, 9, 0)
        assert ensure_utc(naive) == datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)
        berlin = datetime(2030, 1, 7, 10, 0, tzinfo=ZoneInfo("Europe/Berlin"))
        assert ensure_utc(berlin).hour == 9
        assert ensure_utc(berlin).tzinfo == timezone.utc

    def test_local_to_utc(self):
        result = local_to_utc(date(2030, 7, 1), time(9, 0), ZoneInfo("Europe/Berlin"))
        assert result == datetime(2030, 7, 1, 7, 0, tzinfo=timezone.utc)

    def test_today_in_zone(self):
        """23:30 UTC is already the next day in Tokyo."""
        now = datetime(2030, 1, 6, 23, 30, tzinfo=timezone.utc)
        assert today_in(ZoneInfo("Asia/Tokyo"), now) == date(2030, 1, 7)
        assert today_in(ZoneInfo("UTC"), now) == date(2030, 1, 6)

    @pytest.mark.parametrize("hour,minute,label", [
        (0, 0, "12:00 AM"),
        (9, 5, "9:05 AM"),
        (12, 30, "12:30 PM"),
        (17, 0, "5:00 PM"),
    ])
    def test_format_time_label(self, hour, minute, label):
        assert format_time_label(datetime(2030, 1, 7, hour, minute)) == label
