# ============================================================================
# app/services/availability/resolver.py
# Pure slot math - no database access, fully testable
# ============================================================================
"""
Availability resolution over already-fetched records.

Wall-clock windows are kept as (start_minute, end_minute) pairs measured
from local midnight, end exclusive, so 1440 stands for midnight at the end
of the day. Everything after `windows_to_utc` works on aware UTC datetimes.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo
import json
import logging

from app.models.availability import ExceptionType, WEEKDAYS
from app.utils.timezones import ensure_utc, local_to_utc

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

Window = Tuple[int, int]
Interval = Tuple[datetime, datetime]


class ScheduleSource:
    """Which precedence rule produced the effective schedule"""
    EXCEPTION_OVERRIDE = "exception_override"
    CLOSED_MONTH = "closed_month"
    BLOCKED_DATE = "blocked_date"
    UNAVAILABLE_EXCEPTION = "unavailable_exception"
    WEEKLY = "weekly"
    DEFAULT_OPEN = "default_open"
    WEEKLY_CLOSED = "weekly_closed"


@dataclass
class EffectiveSchedule:
    source: str
    windows: List[Window] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return bool(self.windows)


# ----------------------------------------------------------------------------
# Parsing helpers
# ----------------------------------------------------------------------------

def weekday_name(day: date) -> str:
    # date.weekday() is Monday=0, WEEKDAYS starts on Sunday
    return WEEKDAYS[(day.weekday() + 1) % 7]


def normalize_weekday(value: Any) -> Optional[str]:
    """Accept 'monday', 'Mon', 1 or '1' (0 = Sunday); None if unrecognised"""
    raw = str(value).strip().lower()
    if raw.isdigit():
        index = int(raw)
        return WEEKDAYS[index] if 0 <= index < 7 else None
    for name in WEEKDAYS:
        if raw == name or raw == name[:3]:
            return name
    return None


def time_to_minutes(value: time, is_end: bool = False) -> int:
    minutes = value.hour * 60 + value.minute
    if is_end and minutes == 0:
        return MINUTES_PER_DAY
    return minutes


def parse_clock(value: Any, is_end: bool = False) -> int:
    """Parse 'HH:MM' (or a time) into minutes; '24:00' is end of day"""
    if isinstance(value, time):
        return time_to_minutes(value, is_end)
    hours, minutes = str(value).strip().split(":")[:2]
    hours, minutes = int(hours), int(minutes)
    if hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid time of day: {value}")
    total = hours * 60 + minutes
    if is_end and total == 0:
        return MINUTES_PER_DAY
    return total


def parse_custom_schedule(raw: Optional[str]) -> Optional[List[Window]]:
    """
    Read custom hours stored as JSON.

    Accepts {"start": "09:00", "end": "12:00"} or a list of such objects.
    Returns None when the payload is missing or cannot be used.
    """
    if not raw:
        return None
    try:
        payload = json.loads(raw)
        items = payload if isinstance(payload, list) else [payload]
        windows = []
        for item in items:
            start = parse_clock(item["start"])
            end = parse_clock(item["end"], is_end=True)
            if start >= end:
                raise ValueError(f"start {item['start']} is not before end {item['end']}")
            windows.append((start, end))
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning(f"Ignoring malformed custom schedule {raw!r}: {e}")
        return None
    return windows or None


def parse_closed_month(raw: Optional[str]) -> Optional[Tuple[int, int]]:
    """closed_months payload {"month": 0-11, "year": YYYY} -> (month 1-12, year)"""
    if not raw:
        return None
    try:
        payload = json.loads(raw)
        month = int(payload["month"])
        year = int(payload["year"])
        if not 0 <= month <= 11:
            raise ValueError(f"month out of range: {month}")
    except (ValueError, TypeError, KeyError) as e:
        logger.warning(f"Ignoring malformed closed month schedule {raw!r}: {e}")
        return None
    return month + 1, year


def parse_closed_months_setting(raw: Any) -> List[int]:
    """User.closed_months: list of month numbers 1-12"""
    if not raw:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed closed months setting {raw!r}")
            return []
    if not isinstance(raw, list):
        logger.warning(f"Ignoring malformed closed months setting {raw!r}")
        return []
    months = []
    for value in raw:
        try:
            month = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring closed month value {value!r}")
            continue
        if 1 <= month <= 12:
            months.append(month)
    return months


def exception_windows(exc) -> Optional[List[Window]]:
    """Hours of a custom_hours / special_availability exception, None if unusable"""
    if exc.start_time is not None and exc.end_time is not None:
        start = time_to_minutes(exc.start_time)
        end = time_to_minutes(exc.end_time, is_end=True)
        if start < end:
            return [(start, end)]
        logger.warning(f"Ignoring exception {getattr(exc, 'id', None)} with empty time range")
        return None
    return parse_custom_schedule(exc.custom_schedule)


def merge_windows(windows: Iterable[Window]) -> List[Window]:
    """Sort and merge overlapping or adjacent windows"""
    merged: List[Window] = []
    for start, end in sorted(windows):
        if merged and start <= merged[-1][1]:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))
    return merged


# ----------------------------------------------------------------------------
# Precedence
# ----------------------------------------------------------------------------

def _applies(exc, day: date, appointment_type_id) -> bool:
    if exc.appointment_type_id is not None and exc.appointment_type_id != appointment_type_id:
        return False
    return exc.date == day


def _month_closed(day: date, exceptions: Sequence, appointment_type_id, closed_months: Sequence[int]) -> bool:
    if day.month in closed_months:
        return True
    for exc in exceptions:
        if exc.type != ExceptionType.CLOSED_MONTHS:
            continue
        if exc.appointment_type_id is not None and exc.appointment_type_id != appointment_type_id:
            continue
        if parse_closed_month(exc.custom_schedule) == (day.month, day.year):
            return True
    return False


def resolve_effective_schedule(
        day: date,
        appointment_type_id,
        weekly_rows: Sequence,
        exceptions: Sequence,
        blocked_dates: Sequence,
        closed_months: Sequence[int] = (),
        default_open: bool = True
) -> EffectiveSchedule:
    """
    Pick the single schedule that applies to `day`.

    Order: custom_hours / special_availability exception, closed month,
    blocked date range, unavailable exception, weekly pattern.
    """
    day_exceptions = [e for e in exceptions if _applies(e, day, appointment_type_id)]

    override_windows: List[Window] = []
    for exc in day_exceptions:
        if exc.type in ExceptionType.OVERRIDES:
            windows = exception_windows(exc)
            if windows:
                override_windows.extend(windows)
    if override_windows:
        return EffectiveSchedule(ScheduleSource.EXCEPTION_OVERRIDE, merge_windows(override_windows))

    if _month_closed(day, exceptions, appointment_type_id, closed_months):
        return EffectiveSchedule(ScheduleSource.CLOSED_MONTH)

    if any(blocked.start_date <= day <= blocked.end_date for blocked in blocked_dates):
        return EffectiveSchedule(ScheduleSource.BLOCKED_DATE)

    if any(exc.type == ExceptionType.UNAVAILABLE for exc in day_exceptions):
        return EffectiveSchedule(ScheduleSource.UNAVAILABLE_EXCEPTION)

    name = weekday_name(day)
    rows = [row for row in weekly_rows if normalize_weekday(row.weekday) == name]
    if not rows:
        if default_open:
            return EffectiveSchedule(ScheduleSource.DEFAULT_OPEN, [(0, MINUTES_PER_DAY)])
        return EffectiveSchedule(ScheduleSource.WEEKLY_CLOSED)

    windows = []
    for row in rows:
        if row.is_available is False:
            continue
        start = time_to_minutes(row.start_time)
        end = time_to_minutes(row.end_time, is_end=True)
        if start < end:
            windows.append((start, end))
    if not windows:
        return EffectiveSchedule(ScheduleSource.WEEKLY_CLOSED)
    return EffectiveSchedule(ScheduleSource.WEEKLY, merge_windows(windows))


# ----------------------------------------------------------------------------
# Interval math
# ----------------------------------------------------------------------------

def minutes_to_utc(day: date, minutes: int, zone: ZoneInfo) -> datetime:
    extra_days, minute_of_day = divmod(minutes, MINUTES_PER_DAY)
    local_day = day + timedelta(days=extra_days)
    return local_to_utc(local_day, time(minute_of_day // 60, minute_of_day % 60), zone)


def windows_to_utc(day: date, windows: Sequence[Window], zone: ZoneInfo) -> List[Interval]:
    intervals = []
    for start, end in windows:
        start_utc = minutes_to_utc(day, start, zone)
        end_utc = minutes_to_utc(day, end, zone)
        if start_utc < end_utc:
            intervals.append((start_utc, end_utc))
    return intervals


def generate_candidates(
        intervals: Sequence[Interval],
        duration_minutes: int,
        max_slots: Optional[int] = None
) -> List[datetime]:
    """Back-to-back starts of `duration_minutes` that fit entirely in an interval"""
    if duration_minutes <= 0:
        raise ValueError("duration must be positive")
    step = timedelta(minutes=duration_minutes)
    candidates = []
    for start, end in intervals:
        current = start
        while current + step <= end:
            candidates.append(current)
            if max_slots and len(candidates) >= max_slots:
                return candidates
            current += step
    return candidates


def busy_intervals(
        bookings: Sequence,
        appointment_types_by_id: Dict[Any, Any],
        requested_type,
        blocking_statuses: Sequence[str],
        exclude_booking_id=None
) -> List[Interval]:
    """
    Occupied time of each blocking booking, widened by its buffers:
    [start - buffer_before, start + duration + buffer_after)
    """
    intervals = []
    for booking in bookings:
        if booking.status not in blocking_statuses:
            continue
        if exclude_booking_id is not None and booking.id == exclude_booking_id:
            continue

        booking_type = appointment_types_by_id.get(booking.appointment_type_id)
        buffer_source = booking_type or requested_type
        before = buffer_source.buffer_time_before or 0
        after = buffer_source.buffer_time_after or 0
        duration = booking.duration or (booking_type.duration if booking_type else None) or requested_type.duration

        start = ensure_utc(booking.appointment_date)
        intervals.append((
            start - timedelta(minutes=before),
            start + timedelta(minutes=duration + after)
        ))
    return intervals


def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """Half-open [start, end) intersection test"""
    return start < other_end and end > other_start


def remove_conflicts(
        candidates: Sequence[datetime],
        duration_minutes: int,
        busy: Sequence[Interval]
) -> List[datetime]:
    length = timedelta(minutes=duration_minutes)
    return [
        slot for slot in candidates
        if not any(overlaps(slot, slot + length, b_start, b_end) for b_start, b_end in busy)
    ]


def is_within_booking_window(
        day: date,
        today: date,
        window_days: Optional[int] = None,
        window_start: Optional[date] = None,
        window_end: Optional[date] = None,
        last_bookable_date: Optional[date] = None
) -> bool:
    if window_days is not None and day > today + timedelta(days=window_days):
        return False
    if window_start is not None and day < window_start:
        return False
    if window_end is not None and day > window_end:
        return False
    if last_bookable_date is not None and day > last_bookable_date:
        return False
    return True


def compute_slots(
        day: date,
        zone: ZoneInfo,
        schedule: EffectiveSchedule,
        duration_minutes: int,
        busy: Sequence[Interval],
        now: datetime,
        max_slots: Optional[int] = None
) -> List[datetime]:
    """Effective schedule -> sorted, conflict-free, future UTC slot starts"""
    if not schedule.is_open:
        return []
    intervals = windows_to_utc(day, schedule.windows, zone)
    candidates = generate_candidates(intervals, duration_minutes, max_slots)
    free = remove_conflicts(candidates, duration_minutes, busy)
    now = ensure_utc(now)
    return sorted({slot for slot in free if slot >= now})
