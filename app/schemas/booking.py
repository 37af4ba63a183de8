"""
Pydantic schemas for public booking and owner booking management
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID


def _require_aware(v: datetime) -> datetime:
    if v.tzinfo is None or v.utcoffset() is None:
        raise ValueError('appointment_date must include a UTC offset, e.g. 2030-01-07T14:00:00Z')
    return v


class BookingCreateRequest(BaseModel):
    """A customer picking one of the offered slots"""
    user_id: UUID
    appointment_type_id: UUID
    appointment_date: datetime = Field(..., description="Slot start as returned by /public/slots")
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: EmailStr
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator('appointment_date')
    @classmethod
    def validate_appointment_date(cls, v):
        return _require_aware(v)


class BookingRescheduleRequest(BaseModel):
    appointment_date: datetime

    @field_validator('appointment_date')
    @classmethod
    def validate_appointment_date(cls, v):
        return _require_aware(v)
