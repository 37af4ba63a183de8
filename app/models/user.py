# ============================================================================
# FILE: app/models/user.py
# Business owner account. Every availability record is scoped to one user.
# ============================================================================
from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    business_name = Column(String(200), nullable=True)

    # Scheduling configuration
    timezone = Column(String(50), default="UTC")
    closed_months = Column(JSON, nullable=True)  # month numbers 1-12
    booking_window_days = Column(Integer, nullable=True)  # days ahead customers can book
    booking_window_start = Column(Date, nullable=True)
    booking_window_end = Column(Date, nullable=True)
    booking_window_date = Column(Date, nullable=True)  # fixed last bookable date

    # Status flags
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    weekly_availability = relationship(
        "WeeklyAvailability",
        back_populates="user",
        cascade="all, delete-orphan"
    )
    appointment_types = relationship(
        "AppointmentType",
        back_populates="user",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "business_name": self.business_name,
            "timezone": self.timezone,
            "closed_months": self.closed_months or [],
            "booking_window_days": self.booking_window_days,
            "booking_window_start": self.booking_window_start.isoformat() if self.booking_window_start else None,
            "booking_window_end": self.booking_window_end.isoformat() if self.booking_window_end else None,
            "booking_window_date": self.booking_window_date.isoformat() if self.booking_window_date else None,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
