# app/models/appointment_type.py
"""
Appointment Type Model - the bookable services a business offers.
Duration and buffers here drive slot length and padding.
"""
from sqlalchemy import Column, String, Integer, ForeignKey, Boolean, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.models.base import Base


class AppointmentType(Base):
    __tablename__ = "appointment_types"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)  # "30min Consultation"
    description = Column(Text, nullable=True)

    # All in minutes
    duration = Column(Integer, nullable=False)
    buffer_time_before = Column(Integer, default=0)
    buffer_time_after = Column(Integer, default=0)

    price = Column(Integer, default=0)  # cents
    color = Column(String(7), default="#3b82f6")

    # Status and ordering
    is_active = Column(Boolean, default=True, index=True)
    sort_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="appointment_types")

    def __repr__(self):
        return f"<AppointmentType(id={self.id}, name={self.name}, user_id={self.user_id})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "name": self.name,
            "description": self.description,
            "duration": self.duration,
            "buffer_time_before": self.buffer_time_before or 0,
            "buffer_time_after": self.buffer_time_after or 0,
            "price": self.price or 0,
            "formatted_duration": self.formatted_duration,
            "color": self.color,
            "is_active": self.is_active,
            "sort_order": self.sort_order or 0,
        }

    @property
    def formatted_duration(self) -> str:
        """Return human-readable duration string"""
        if not self.duration:
            return "Duration varies"

        hours = self.duration // 60
        minutes = self.duration % 60

        if hours > 0 and minutes > 0:
            return f"{hours}h {minutes}m"
        elif hours > 0:
            return f"{hours}h"
        else:
            return f"{minutes}m"
