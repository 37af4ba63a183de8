# ============================================================================
# app/services/booking/booking_service.py
# Pure business logic - no FastAPI dependencies, fully testable
# ============================================================================
"""Service for creating and managing bookings"""
from sqlalchemy.orm import Session
from datetime import datetime, date, time, timedelta, timezone
from typing import Optional, Dict, Any
from uuid import UUID
import logging

from app.models.appointment_type import AppointmentType
from app.models.booking import Booking, BookingStatus
from app.models.user import User
from app.services.availability.availability_service import AvailabilityService
from app.utils.timezones import ensure_utc

logger = logging.getLogger(__name__)


class SlotUnavailableError(ValueError):
    """The requested start time is not (or no longer) bookable"""


class BookingService:
    """Handles booking operations"""

    @staticmethod
    def create_booking(
            db: Session,
            user_id: UUID,
            appointment_type_id: UUID,
            customer_name: str,
            customer_email: str,
            appointment_date: datetime,
            notes: Optional[str] = None,
            now: Optional[datetime] = None
    ) -> Booking:
        """
        Create a confirmed booking after re-checking the slot.

        Raises LookupError for an unknown user or appointment type and
        SlotUnavailableError when the start time is not a free slot.
        """
        user = BookingService._lock_user(db, user_id)
        appointment_type = db.get(AppointmentType, appointment_type_id)
        if not appointment_type or not appointment_type.is_active:
            raise LookupError("Appointment type not found")
        if appointment_type.user_id != user.id:
            raise LookupError("Appointment type does not belong to this user")

        start = ensure_utc(appointment_date)
        BookingService._ensure_slot_free(db, user, appointment_type.id, start, now)

        booking = Booking(
            user_id=user.id,
            appointment_type_id=appointment_type.id,
            customer_name=customer_name.strip(),
            customer_email=customer_email.strip(),
            appointment_date=start,
            duration=appointment_type.duration,
            notes=notes,
            status=BookingStatus.CONFIRMED
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)

        logger.info(f"Created booking {booking.id} for user {user.id} at {start.isoformat()}")
        return booking

    @staticmethod
    def reschedule_booking(
            db: Session,
            user_id: UUID,
            booking_id: UUID,
            appointment_date: datetime,
            now: Optional[datetime] = None
    ) -> Optional[Booking]:
        """Move a booking; its current time does not count as taken. None if not found."""
        user = BookingService._lock_user(db, user_id)
        booking = BookingService.get_booking(db, user.id, booking_id)
        if not booking:
            return None
        if booking.status == BookingStatus.CANCELLED:
            raise SlotUnavailableError("Cancelled bookings cannot be rescheduled")

        appointment_type = db.get(AppointmentType, booking.appointment_type_id) if booking.appointment_type_id else None
        if appointment_type is not None and not appointment_type.is_active:
            raise SlotUnavailableError("This appointment type is no longer offered")

        start = ensure_utc(appointment_date)
        BookingService._ensure_slot_free(
            db, user, booking.appointment_type_id, start, now,
            exclude_booking_id=booking.id
        )

        booking.appointment_date = start
        db.commit()
        db.refresh(booking)
        logger.info(f"Rescheduled booking {booking.id} to {start.isoformat()}")
        return booking

    @staticmethod
    def cancel_booking(db: Session, user_id: UUID, booking_id: UUID) -> Optional[Booking]:
        booking = BookingService.get_booking(db, user_id, booking_id)
        if not booking:
            return None

        if booking.status != BookingStatus.CANCELLED:
            booking.status = BookingStatus.CANCELLED
            booking.cancelled_at = datetime.now(timezone.utc)
            db.commit()
            db.refresh(booking)
            logger.info(f"Cancelled booking {booking.id}")
        return booking

    @staticmethod
    def get_booking(db: Session, user_id: UUID, booking_id: UUID) -> Optional[Booking]:
        return db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.user_id == user_id
        ).first()

    @staticmethod
    def get_booking_by_token(db: Session, token: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.booking_token == token).first()

    @staticmethod
    def list_bookings(
            db: Session,
            user_id: UUID,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
            status: Optional[str] = None,
            skip: int = 0,
            limit: int = 50
    ) -> Dict[str, Any]:
        """Paginated bookings; date filters are UTC calendar dates."""
        query = db.query(Booking).filter(Booking.user_id == user_id)

        if start_date:
            query = query.filter(
                Booking.appointment_date >= datetime.combine(start_date, time.min, tzinfo=timezone.utc)
            )
        if end_date:
            query = query.filter(
                Booking.appointment_date < datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
            )
        if status:
            query = query.filter(Booking.status == status)

        query = query.order_by(Booking.appointment_date.asc())
        total = query.count()
        bookings = query.offset(skip).limit(limit).all()

        return {
            "user_id": str(user_id),
            "total_bookings": total,
            "page": {
                "skip": skip,
                "limit": limit,
                "total_pages": (total + limit - 1) // limit if total > 0 else 0
            },
            "bookings": [b.to_dict() for b in bookings]
        }

    @staticmethod
    def _lock_user(db: Session, user_id: UUID) -> User:
        # Row lock serializes concurrent bookings for one owner (no-op on SQLite)
        user = db.query(User).filter(
            User.id == user_id,
            User.is_active == True
        ).with_for_update().first()
        if not user:
            raise LookupError("User not found")
        return user

    @staticmethod
    def _ensure_slot_free(
            db: Session,
            user: User,
            appointment_type_id: Optional[UUID],
            start: datetime,
            now: Optional[datetime],
            exclude_booking_id: Optional[UUID] = None
    ):
        if appointment_type_id is None:
            raise SlotUnavailableError("Booking has no appointment type to check against")

        zone = AvailabilityService.business_zone(user)
        local_day = start.astimezone(zone).date()
        slots = AvailabilityService.get_slots(
            db, user.id, appointment_type_id, local_day,
            now=now, exclude_booking_id=exclude_booking_id
        )
        if slots is None:
            raise LookupError("Appointment type not found")
        if start not in slots:
            logger.info(f"Rejected booking for user {user.id} at {start.isoformat()}: slot not available")
            raise SlotUnavailableError("The selected time slot is no longer available. Please choose a different time.")
