# app/models/__init__.py
from .base import Base
from .user import User
from .availability import WeeklyAvailability, AvailabilityException, BlockedDate, ExceptionType, WEEKDAYS
from .appointment_type import AppointmentType
from .booking import Booking, BookingStatus

__all__ = [
    "Base",
    "User",
    "WeeklyAvailability",
    "AvailabilityException",
    "BlockedDate",
    "ExceptionType",
    "WEEKDAYS",
    "AppointmentType",
    "Booking",
    "BookingStatus",
]
