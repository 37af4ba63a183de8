# ===== app/services/availability/availability_service.py =====
from typing import Any, Dict, List, Optional
from datetime import date, datetime, time, timedelta, timezone
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session
import json
import logging

from app.config.settings import get_settings
from app.models.appointment_type import AppointmentType
from app.models.availability import (
    AvailabilityException,
    BlockedDate,
    ExceptionType,
    WEEKDAYS,
    WeeklyAvailability,
)
from app.models.booking import Booking
from app.models.user import User
from app.services.availability import resolver
from app.utils.timezones import format_time_label, get_zone, local_to_utc, map_to_supported_timezone, today_in

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 62


class AvailabilityService:
    """Reads a user's availability records and turns them into bookable slots"""

    # ------------------------------------------------------------------
    # Slot resolution
    # ------------------------------------------------------------------

    @staticmethod
    def get_slots(
            db: Session,
            user_id: UUID,
            appointment_type_id: UUID,
            day: date,
            customer_timezone: Optional[str] = None,
            now: Optional[datetime] = None,
            exclude_booking_id: Optional[UUID] = None
    ) -> Optional[List[datetime]]:
        """
        Bookable UTC start times for `day` (a date in the business timezone).

        Returns None when the user or appointment type does not exist.
        Raises ValueError for an unknown customer timezone.
        """
        if customer_timezone:
            get_zone(customer_timezone)

        context = AvailabilityService._load_context(db, user_id, appointment_type_id)
        if context is None:
            return None
        user, appointment_type, zone = context

        return AvailabilityService._slots_for_day(
            db, user, appointment_type, zone, day,
            now or datetime.now(timezone.utc),
            exclude_booking_id
        )

    @staticmethod
    def get_slots_for_range(
            db: Session,
            user_id: UUID,
            appointment_type_id: UUID,
            start_date: date,
            end_date: date,
            now: Optional[datetime] = None
    ) -> Optional[Dict[str, List[datetime]]]:
        """Slots for every day in [start_date, end_date]; days without slots are omitted"""
        if end_date < start_date:
            raise ValueError("end_date must not be before start_date")
        if (end_date - start_date).days >= MAX_RANGE_DAYS:
            raise ValueError(f"Date range cannot exceed {MAX_RANGE_DAYS} days")

        context = AvailabilityService._load_context(db, user_id, appointment_type_id)
        if context is None:
            return None
        user, appointment_type, zone = context
        now = now or datetime.now(timezone.utc)

        result = {}
        current = start_date
        while current <= end_date:
            slots = AvailabilityService._slots_for_day(db, user, appointment_type, zone, current, now, None)
            if slots:
                result[current.isoformat()] = slots
            current += timedelta(days=1)
        return result

    @staticmethod
    def get_effective_schedule(
            db: Session,
            user_id: UUID,
            appointment_type_id: Optional[UUID],
            day: date
    ) -> Optional[resolver.EffectiveSchedule]:
        """Which precedence rule wins for `day`, without booking or clock filtering"""
        user = db.get(User, user_id)
        if not user:
            return None
        return AvailabilityService._resolve_schedule(db, user, appointment_type_id, day)

    @staticmethod
    def format_for_display(slots: List[datetime], customer_timezone: str) -> Dict[str, Any]:
        """Attach customer-local times to UTC slots. Comparisons never use these values."""
        zone = get_zone(customer_timezone)
        display_zone = map_to_supported_timezone(customer_timezone)
        return {
            "timezone": customer_timezone,
            "display_timezone": display_zone,
            "display": [
                {
                    "start": slot.isoformat(),
                    "local_time": slot.astimezone(zone).isoformat(),
                    "label": format_time_label(slot.astimezone(zone)),
                }
                for slot in slots
            ],
        }

    @staticmethod
    def _load_context(db: Session, user_id: UUID, appointment_type_id: UUID):
        user = db.get(User, user_id)
        if not user or not user.is_active:
            logger.info(f"Slots requested for unknown user {user_id}")
            return None

        appointment_type = db.get(AppointmentType, appointment_type_id)
        if not appointment_type or appointment_type.user_id != user.id or not appointment_type.is_active:
            logger.info(f"Slots requested for unknown appointment type {appointment_type_id} (user {user_id})")
            return None

        return user, appointment_type, AvailabilityService.business_zone(user)

    @staticmethod
    def business_zone(user: User):
        try:
            return get_zone(user.timezone or get_settings().DEFAULT_TIMEZONE)
        except ValueError:
            logger.error(f"Invalid timezone '{user.timezone}' for user {user.id}, using UTC")
            return get_zone("UTC")

    @staticmethod
    def _resolve_schedule(db: Session, user: User, appointment_type_id, day: date) -> resolver.EffectiveSchedule:
        settings = get_settings()

        weekly_rows = db.query(WeeklyAvailability).filter(
            WeeklyAvailability.user_id == user.id
        ).all()

        exceptions = db.query(AvailabilityException).filter(
            AvailabilityException.user_id == user.id,
            or_(
                AvailabilityException.date == day,
                AvailabilityException.type == ExceptionType.CLOSED_MONTHS
            )
        ).all()

        blocked_dates = db.query(BlockedDate).filter(
            BlockedDate.user_id == user.id,
            BlockedDate.start_date <= day,
            BlockedDate.end_date >= day
        ).all()

        return resolver.resolve_effective_schedule(
            day,
            appointment_type_id,
            weekly_rows,
            exceptions,
            blocked_dates,
            closed_months=resolver.parse_closed_months_setting(user.closed_months),
            default_open=settings.DEFAULT_OPEN_WHEN_NO_WEEKLY_ROWS
        )

    @staticmethod
    def _slots_for_day(
            db: Session,
            user: User,
            appointment_type: AppointmentType,
            zone,
            day: date,
            now: datetime,
            exclude_booking_id: Optional[UUID]
    ) -> List[datetime]:
        settings = get_settings()

        if not resolver.is_within_booking_window(
                day,
                today_in(zone, now),
                user.booking_window_days,
                user.booking_window_start,
                user.booking_window_end,
                user.booking_window_date
        ):
            return []

        schedule = AvailabilityService._resolve_schedule(db, user, appointment_type.id, day)
        if not schedule.is_open:
            logger.debug(f"User {user.id} closed on {day} ({schedule.source})")
            return []

        # Bookings that could reach into the day once buffers are added
        day_start = local_to_utc(day, time(0, 0), zone) - timedelta(days=1)
        day_end = local_to_utc(day + timedelta(days=1), time(0, 0), zone) + timedelta(days=1)
        bookings = db.query(Booking).filter(
            Booking.user_id == user.id,
            Booking.status.in_(settings.BLOCKING_BOOKING_STATUSES),
            Booking.appointment_date >= day_start,
            Booking.appointment_date < day_end
        ).all()

        type_ids = {b.appointment_type_id for b in bookings if b.appointment_type_id}
        types_by_id = {}
        if type_ids:
            types_by_id = {
                t.id: t for t in db.query(AppointmentType).filter(AppointmentType.id.in_(type_ids)).all()
            }

        busy = resolver.busy_intervals(
            bookings,
            types_by_id,
            appointment_type,
            settings.BLOCKING_BOOKING_STATUSES,
            exclude_booking_id
        )

        duration = appointment_type.duration or settings.DEFAULT_APPOINTMENT_DURATION
        return resolver.compute_slots(
            day, zone, schedule, duration, busy, now,
            max_slots=settings.MAX_SLOTS_PER_DAY
        )

    # ------------------------------------------------------------------
    # Weekly availability
    # ------------------------------------------------------------------

    @staticmethod
    def get_weekly_availability(db: Session, user_id: UUID) -> Dict[str, List[Dict[str, str]]]:
        """Weekly hours grouped by day, in the same shape the editor saves"""
        rows = db.query(WeeklyAvailability).filter(
            WeeklyAvailability.user_id == user_id
        ).order_by(WeeklyAvailability.start_time).all()

        schedule = {day: [] for day in WEEKDAYS}
        for row in rows:
            day = resolver.normalize_weekday(row.weekday)
            if day and row.is_available:
                schedule[day].append({
                    "start": row.start_time.strftime("%H:%M"),
                    "end": "24:00" if row.end_time == time(0, 0) else row.end_time.strftime("%H:%M"),
                })
        return schedule

    @staticmethod
    def replace_weekly_availability(
            db: Session,
            user_id: UUID,
            weekly_schedule: Dict[str, List[Dict[str, str]]]
    ) -> List[WeeklyAvailability]:
        """
        Replace the whole week in one transaction.

        Days missing from the payload or saved with no intervals get a
        single unavailable placeholder row so they stay closed.
        """
        normalized: Dict[str, List[resolver.Window]] = {day: [] for day in WEEKDAYS}
        for key, intervals in weekly_schedule.items():
            day = resolver.normalize_weekday(key)
            if day is None:
                raise ValueError(f"Unknown weekday: {key}")
            for interval in intervals or []:
                start = resolver.parse_clock(interval["start"])
                end = resolver.parse_clock(interval["end"], is_end=True)
                if start >= end:
                    raise ValueError(f"{day}: start {interval['start']} must be before end {interval['end']}")
                normalized[day].append((start, end))

        db.query(WeeklyAvailability).filter(
            WeeklyAvailability.user_id == user_id
        ).delete(synchronize_session=False)

        rows = []
        for day in WEEKDAYS:
            windows = resolver.merge_windows(normalized[day])
            if not windows:
                rows.append(WeeklyAvailability(
                    user_id=user_id,
                    weekday=day,
                    start_time=time(0, 0),
                    end_time=time(0, 0),
                    is_available=False
                ))
                continue
            for start, end in windows:
                rows.append(WeeklyAvailability(
                    user_id=user_id,
                    weekday=day,
                    start_time=_minutes_to_time(start),
                    end_time=_minutes_to_time(end),
                    is_available=True
                ))

        db.add_all(rows)
        db.commit()
        logger.info(f"Replaced weekly availability for user {user_id} ({len(rows)} rows)")
        return rows

    # ------------------------------------------------------------------
    # Exceptions
    # ------------------------------------------------------------------

    @staticmethod
    def list_exceptions(
            db: Session,
            user_id: UUID,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[AvailabilityException]:
        query = db.query(AvailabilityException).filter(AvailabilityException.user_id == user_id)
        if start_date:
            query = query.filter(AvailabilityException.date >= start_date)
        if end_date:
            query = query.filter(AvailabilityException.date <= end_date)
        return query.order_by(AvailabilityException.date.asc()).all()

    @staticmethod
    def create_exception(db: Session, user_id: UUID, data: Dict[str, Any]) -> AvailabilityException:
        AvailabilityService._validate_exception(db, user_id, data)
        exception = AvailabilityException(user_id=user_id, **data)
        db.add(exception)
        db.commit()
        db.refresh(exception)
        logger.info(f"Created {exception.type} exception {exception.id} on {exception.date} for user {user_id}")
        return exception

    @staticmethod
    def update_exception(
            db: Session,
            user_id: UUID,
            exception_id: UUID,
            updates: Dict[str, Any]
    ) -> Optional[AvailabilityException]:
        exception = db.query(AvailabilityException).filter(
            AvailabilityException.id == exception_id,
            AvailabilityException.user_id == user_id
        ).first()
        if not exception:
            return None

        merged = {
            "type": exception.type,
            "date": exception.date,
            "start_time": exception.start_time,
            "end_time": exception.end_time,
            "appointment_type_id": exception.appointment_type_id,
            "custom_schedule": exception.custom_schedule,
        }
        merged.update(updates)
        AvailabilityService._validate_exception(db, user_id, merged)

        for key, value in updates.items():
            setattr(exception, key, value)
        db.commit()
        db.refresh(exception)
        return exception

    @staticmethod
    def delete_exception(db: Session, user_id: UUID, exception_id: UUID) -> bool:
        deleted = db.query(AvailabilityException).filter(
            AvailabilityException.id == exception_id,
            AvailabilityException.user_id == user_id
        ).delete(synchronize_session=False)
        db.commit()
        return deleted > 0

    @staticmethod
    def set_closed_months(db: Session, user_id: UUID, year: int, months: List[int]) -> List[AvailabilityException]:
        """Replace the closed_months exceptions of one year. Months are 1-12."""
        for month in months:
            if not 1 <= month <= 12:
                raise ValueError(f"Invalid month: {month}")

        existing = db.query(AvailabilityException).filter(
            AvailabilityException.user_id == user_id,
            AvailabilityException.type == ExceptionType.CLOSED_MONTHS
        ).all()
        for exception in existing:
            parsed = resolver.parse_closed_month(exception.custom_schedule)
            if parsed is None or parsed[1] == year:
                db.delete(exception)

        created = []
        for month in sorted(set(months)):
            created.append(AvailabilityException(
                user_id=user_id,
                date=date(year, month, 1),
                type=ExceptionType.CLOSED_MONTHS,
                custom_schedule=json.dumps({"month": month - 1, "year": year})
            ))
        db.add_all(created)
        db.commit()
        logger.info(f"Closed months for user {user_id} in {year}: {sorted(set(months))}")
        return created

    @staticmethod
    def _validate_exception(db: Session, user_id: UUID, data: Dict[str, Any]):
        exc_type = data.get("type")
        if exc_type not in ExceptionType.ALL:
            raise ValueError(f"Type must be one of: {', '.join(ExceptionType.ALL)}")

        start, end = data.get("start_time"), data.get("end_time")
        if (start is None) != (end is None):
            raise ValueError("start_time and end_time must be given together")
        if start is not None and resolver.time_to_minutes(start) >= resolver.time_to_minutes(end, is_end=True):
            raise ValueError("start_time must be before end_time")

        if exc_type == ExceptionType.CLOSED_MONTHS and resolver.parse_closed_month(data.get("custom_schedule")) is None:
            raise ValueError('closed_months exceptions need custom_schedule {"month": 0-11, "year": YYYY}')

        appointment_type_id = data.get("appointment_type_id")
        if appointment_type_id is not None:
            appointment_type = db.get(AppointmentType, appointment_type_id)
            if not appointment_type or appointment_type.user_id != user_id:
                raise LookupError("Appointment type not found")

    # ------------------------------------------------------------------
    # Blocked dates
    # ------------------------------------------------------------------

    @staticmethod
    def list_blocked_dates(db: Session, user_id: UUID) -> List[BlockedDate]:
        return db.query(BlockedDate).filter(
            BlockedDate.user_id == user_id
        ).order_by(BlockedDate.start_date.asc()).all()

    @staticmethod
    def create_blocked_date(db: Session, user_id: UUID, data: Dict[str, Any]) -> BlockedDate:
        if data["start_date"] > data["end_date"]:
            raise ValueError("start_date must not be after end_date")
        blocked = BlockedDate(user_id=user_id, **data)
        db.add(blocked)
        db.commit()
        db.refresh(blocked)
        logger.info(f"Blocked {blocked.start_date}..{blocked.end_date} for user {user_id}")
        return blocked

    @staticmethod
    def update_blocked_date(
            db: Session,
            user_id: UUID,
            blocked_date_id: UUID,
            updates: Dict[str, Any]
    ) -> Optional[BlockedDate]:
        blocked = db.query(BlockedDate).filter(
            BlockedDate.id == blocked_date_id,
            BlockedDate.user_id == user_id
        ).first()
        if not blocked:
            return None

        start = updates.get("start_date", blocked.start_date)
        end = updates.get("end_date", blocked.end_date)
        if start > end:
            raise ValueError("start_date must not be after end_date")

        for key, value in updates.items():
            setattr(blocked, key, value)
        db.commit()
        db.refresh(blocked)
        return blocked

    @staticmethod
    def delete_blocked_date(db: Session, user_id: UUID, blocked_date_id: UUID) -> bool:
        deleted = db.query(BlockedDate).filter(
            BlockedDate.id == blocked_date_id,
            BlockedDate.user_id == user_id
        ).delete(synchronize_session=False)
        db.commit()
        return deleted > 0


def _minutes_to_time(minutes: int) -> time:
    minutes %= resolver.MINUTES_PER_DAY
    return time(minutes // 60, minutes % 60)
