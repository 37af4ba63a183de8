"""
Pydantic schemas for business owners and their scheduling settings
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import date

from app.utils.timezones import is_valid_timezone


def _reject_null(v):
    if v is None:
        raise ValueError("This field cannot be null")
    return v


def _check_timezone(v):
    if v is not None and not is_valid_timezone(v):
        raise ValueError(f'Unknown timezone: {v}')
    return v


class UserCreateRequest(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    business_name: Optional[str] = Field(None, max_length=200)
    timezone: str = "UTC"

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        return _check_timezone(v)


class UserSettingsUpdate(BaseModel):
    """
    Scheduling settings. All fields are optional - only send what you want to update.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    business_name: Optional[str] = Field(None, max_length=200)
    timezone: Optional[str] = None
    closed_months: Optional[List[int]] = None
    booking_window_days: Optional[int] = Field(None, ge=0, le=3650)
    booking_window_start: Optional[date] = None
    booking_window_end: Optional[date] = None
    booking_window_date: Optional[date] = None  # last bookable date

    @field_validator('name', 'timezone')
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        return _check_timezone(v)

    @field_validator('closed_months')
    @classmethod
    def validate_closed_months(cls, v):
        if v is None:
            return v
        for month in v:
            if not 1 <= month <= 12:
                raise ValueError('Months must be between 1 and 12')
        return sorted(set(v))
