# ===== app/models/booking.py =====
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.models.base import Base
import secrets
from app.utils.timezones import ensure_utc
import uuid


class BookingStatus:
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"

    ALL = (CONFIRMED, PENDING, CANCELLED)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("idx_bookings_user_status_date", "user_id", "status", "appointment_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # References
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    appointment_type_id = Column(UUID(as_uuid=True), ForeignKey("appointment_types.id"), nullable=True)

    # Customer info
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)

    # Appointment details
    appointment_date = Column(DateTime(timezone=True), nullable=False, index=True)  # UTC start
    duration = Column(Integer, default=30)  # minutes, overrides the appointment type
    notes = Column(Text, nullable=True)

    status = Column(String, default=BookingStatus.CONFIRMED)  # confirmed, pending, cancelled
    booking_token = Column(String(64), unique=True, nullable=False, default=lambda: secrets.token_urlsafe(16))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    appointment_type = relationship("AppointmentType")

    def to_dict(self):
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "appointment_type_id": str(self.appointment_type_id) if self.appointment_type_id else None,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "appointment_date": ensure_utc(self.appointment_date).isoformat(),
            "duration": self.duration,
            "notes": self.notes,
            "status": self.status,
            "booking_token": self.booking_token,
            "cancelled_at": ensure_utc(self.cancelled_at).isoformat() if self.cancelled_at else None,
        }
