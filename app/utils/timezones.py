# app/utils/timezones.py
"""
Timezone helpers.

All interval math runs on real IANA zones. The supported-timezone list below
is a presentation concern only: it decides which label the booking page
shows, never which offset is used for a computation.
"""
from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

logger = logging.getLogger(__name__)

SUPPORTED_TIMEZONES = [
    "America/Los_Angeles",
    "America/Denver",
    "America/Chicago",
    "America/New_York",
    "America/Halifax",
    "America/Anchorage",
    "Pacific/Honolulu",
    "Europe/London",
    "Europe/Lisbon",
    "Europe/Berlin",
    "Europe/Athens",
    "Asia/Dubai",
    "Asia/Kolkata",
    "Asia/Shanghai",
    "Asia/Singapore",
    "Asia/Tokyo",
    "Australia/Sydney",
    "Pacific/Auckland",
    "America/Sao_Paulo",
    "Etc/UTC",
]

TIMEZONE_LABELS = {
    "America/Los_Angeles": "Pacific Time (PT)",
    "America/Denver": "Mountain Time (MT)",
    "America/Chicago": "Central Time (CT)",
    "America/New_York": "Eastern Time (ET)",
    "America/Halifax": "Atlantic Time (AT)",
    "America/Anchorage": "Alaska Time (AKST)",
    "Pacific/Honolulu": "Hawaii Time (HST)",
    "Europe/London": "Greenwich Mean Time (GMT)",
    "Europe/Lisbon": "Western European Time (WET)",
    "Europe/Berlin": "Central European Time (CET)",
    "Europe/Athens": "Eastern European Time (EET)",
    "Asia/Dubai": "Gulf Standard Time (GST)",
    "Asia/Kolkata": "India Standard Time (IST)",
    "Asia/Shanghai": "China Standard Time (CST)",
    "Asia/Singapore": "Singapore Standard Time (SGT)",
    "Asia/Tokyo": "Japan Standard Time (JST)",
    "Australia/Sydney": "Australian Eastern Time (AET)",
    "Pacific/Auckland": "New Zealand Standard Time (NZST)",
    "America/Sao_Paulo": "Brasília Time (BRT)",
    "Etc/UTC": "Coordinated Universal Time (UTC)",
}

# Aliases and neighbouring zones snapped to the closest supported zone
TIMEZONE_ALIASES = {
    # US Pacific
    "America/Tijuana": "America/Los_Angeles",
    "America/Vancouver": "America/Los_Angeles",
    "US/Pacific": "America/Los_Angeles",
    "PST8PDT": "America/Los_Angeles",
    # US Mountain
    "America/Phoenix": "America/Denver",
    "America/Boise": "America/Denver",
    "America/Edmonton": "America/Denver",
    "US/Mountain": "America/Denver",
    "MST7MDT": "America/Denver",
    # US Central
    "America/Mexico_City": "America/Chicago",
    "America/Winnipeg": "America/Chicago",
    "America/Regina": "America/Chicago",
    "US/Central": "America/Chicago",
    "CST6CDT": "America/Chicago",
    # US Eastern
    "America/Toronto": "America/New_York",
    "America/Montreal": "America/New_York",
    "America/Detroit": "America/New_York",
    "America/Indiana/Indianapolis": "America/New_York",
    "US/Eastern": "America/New_York",
    "EST5EDT": "America/New_York",
    # Atlantic
    "America/Bermuda": "America/Halifax",
    "America/Thule": "America/Halifax",
    # Alaska
    "America/Juneau": "America/Anchorage",
    "America/Nome": "America/Anchorage",
    "America/Yakutat": "America/Anchorage",
    "US/Alaska": "America/Anchorage",
    # Hawaii
    "Pacific/Johnston": "Pacific/Honolulu",
    "US/Hawaii": "Pacific/Honolulu",
    "HST": "Pacific/Honolulu",
    # Europe/GMT
    "Europe/Dublin": "Europe/London",
    "Europe/Guernsey": "Europe/London",
    "Europe/Isle_of_Man": "Europe/London",
    "Europe/Jersey": "Europe/London",
    "GB": "Europe/London",
    "GMT": "Europe/London",
    # Western Europe
    "Europe/Porto": "Europe/Lisbon",
    "Atlantic/Canary": "Europe/Lisbon",
    "Atlantic/Madeira": "Europe/Lisbon",
    "WET": "Europe/Lisbon",
    # Central Europe
    "Europe/Paris": "Europe/Berlin",
    "Europe/Rome": "Europe/Berlin",
    "Europe/Amsterdam": "Europe/Berlin",
    "Europe/Brussels": "Europe/Berlin",
    "Europe/Copenhagen": "Europe/Berlin",
    "Europe/Madrid": "Europe/Berlin",
    "Europe/Oslo": "Europe/Berlin",
    "Europe/Prague": "Europe/Berlin",
    "Europe/Stockholm": "Europe/Berlin",
    "Europe/Vienna": "Europe/Berlin",
    "Europe/Warsaw": "Europe/Berlin",
    "Europe/Zurich": "Europe/Berlin",
    "CET": "Europe/Berlin",
    # Eastern Europe
    "Europe/Helsinki": "Europe/Athens",
    "Europe/Kiev": "Europe/Athens",
    "Europe/Kyiv": "Europe/Athens",
    "Europe/Bucharest": "Europe/Athens",
    "Europe/Sofia": "Europe/Athens",
    "EET": "Europe/Athens",
    # Gulf
    "Asia/Muscat": "Asia/Dubai",
    "Asia/Bahrain": "Asia/Dubai",
    "Asia/Qatar": "Asia/Dubai",
    "Asia/Riyadh": "Asia/Dubai",
    # India
    "Asia/Calcutta": "Asia/Kolkata",
    # China
    "Asia/Hong_Kong": "Asia/Shanghai",
    "Asia/Macau": "Asia/Shanghai",
    "Asia/Taipei": "Asia/Shanghai",
    "PRC": "Asia/Shanghai",
    # Southeast Asia
    "Asia/Kuala_Lumpur": "Asia/Singapore",
    "Asia/Jakarta": "Asia/Singapore",
    "Asia/Bangkok": "Asia/Singapore",
    # Japan
    "Asia/Osaka": "Asia/Tokyo",
    "Japan": "Asia/Tokyo",
    "JST": "Asia/Tokyo",
    # Australia
    "Australia/Melbourne": "Australia/Sydney",
    "Australia/Brisbane": "Australia/Sydney",
    "Australia/Canberra": "Australia/Sydney",
    # New Zealand
    "Pacific/Chatham": "Pacific/Auckland",
    "NZ": "Pacific/Auckland",
    # South America
    "America/Argentina/Buenos_Aires": "America/Sao_Paulo",
    "America/Santiago": "America/Sao_Paulo",
    "America/Montevideo": "America/Sao_Paulo",
    # UTC
    "UTC": "Etc/UTC",
    "Etc/GMT": "Etc/UTC",
}


def map_to_supported_timezone(tz_name: Optional[str]) -> str:
    """Snap any timezone name to one of the supported display timezones"""
    if not tz_name:
        return "Etc/UTC"

    if tz_name in SUPPORTED_TIMEZONES:
        return tz_name

    mapped = TIMEZONE_ALIASES.get(tz_name)
    if mapped in SUPPORTED_TIMEZONES:
        return mapped

    logger.warning(f"Timezone {tz_name} not in supported list, displaying as UTC")
    return "Etc/UTC"


def get_zone(tz_name: str) -> ZoneInfo:
    """Load an IANA zone; raises ValueError for unknown names"""
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise ValueError(f"Unknown timezone: {tz_name}") from e


def is_valid_timezone(tz_name: Optional[str]) -> bool:
    if not tz_name:
        return False
    try:
        get_zone(tz_name)
    except ValueError:
        return False
    return True


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values (SQLite) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_to_utc(day: date, wall_time: time, zone: ZoneInfo) -> datetime:
    """
    Convert a wall-clock time on a date in `zone` to UTC.

    Ambiguous times (DST fall back) resolve to the first occurrence.
    Times inside a DST gap keep the pre-transition offset, which moves
    them forward past the gap.
    """
    local = datetime.combine(day, wall_time).replace(tzinfo=zone, fold=0)
    return local.astimezone(timezone.utc)


def today_in(zone: ZoneInfo, now: Optional[datetime] = None) -> date:
    now = now or datetime.now(timezone.utc)
    return ensure_utc(now).astimezone(zone).date()


def format_time_label(value: datetime) -> str:
    """12 hour label as shown on the booking page, e.g. '9:00 AM'"""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"
