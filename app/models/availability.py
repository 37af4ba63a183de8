# ===== app/models/availability.py =====
from sqlalchemy import Column, String, Boolean, Time, Date, DateTime, Text, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.models.base import Base
import uuid


WEEKDAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


class ExceptionType:
    """Values stored in AvailabilityException.type"""
    UNAVAILABLE = "unavailable"
    CUSTOM_HOURS = "custom_hours"
    SPECIAL_AVAILABILITY = "special_availability"
    CLOSED_MONTHS = "closed_months"

    ALL = (UNAVAILABLE, CUSTOM_HOURS, SPECIAL_AVAILABILITY, CLOSED_MONTHS)
    OVERRIDES = (CUSTOM_HOURS, SPECIAL_AVAILABILITY)


def _fmt_time(value):
    return value.strftime("%H:%M") if value is not None else None


class WeeklyAvailability(Base):
    """Recurring weekly hours. Several rows per weekday model split shifts."""
    __tablename__ = "weekly_availability"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    weekday = Column(String(10), nullable=False)  # "monday" ... "sunday"
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)  # 00:00 means midnight at the end of the day
    is_available = Column(Boolean, default=True)

    user = relationship("User", back_populates="weekly_availability")

    def to_dict(self):
        return {
            "id": str(self.id),
            "weekday": self.weekday,
            "start_time": _fmt_time(self.start_time),
            "end_time": _fmt_time(self.end_time),
            "is_available": self.is_available,
        }


class AvailabilityException(Base):
    """Single-date overrides (days off, custom hours, closed months)"""
    __tablename__ = "availability_exceptions"
    __table_args__ = (
        Index("idx_availability_exceptions_user_date", "user_id", "date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Scopes the exception to one appointment type; NULL applies to all of them
    appointment_type_id = Column(
        UUID(as_uuid=True),
        ForeignKey("appointment_types.id", ondelete="CASCADE"),
        nullable=True
    )

    date = Column(Date, nullable=False)
    type = Column(String(30), nullable=False)
    start_time = Column(Time, nullable=True)  # NULL means all day
    end_time = Column(Time, nullable=True)
    reason = Column(String, nullable=True)  # "Vacation", "Meeting", etc.
    custom_schedule = Column(Text, nullable=True)  # JSON payload, see resolver

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "appointment_type_id": str(self.appointment_type_id) if self.appointment_type_id else None,
            "date": self.date.isoformat(),
            "type": self.type,
            "start_time": _fmt_time(self.start_time),
            "end_time": _fmt_time(self.end_time),
            "reason": self.reason,
            "custom_schedule": self.custom_schedule,
        }


class BlockedDate(Base):
    """Inclusive range of whole days with no availability (vacations, holidays)"""
    __tablename__ = "blocked_dates"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)
    is_all_day = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "reason": self.reason,
            "is_all_day": self.is_all_day,
        }
