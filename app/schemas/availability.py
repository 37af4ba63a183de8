"""
Pydantic schemas for weekly hours, exceptions and blocked dates
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Dict, List, Any, Union
import datetime as dt
from uuid import UUID
import json

from app.models.availability import ExceptionType


# ============================================================================
# Weekly hours
# ============================================================================

class TimeInterval(BaseModel):
    """One open interval, 'HH:MM' wall clock; '24:00' closes at midnight"""
    start: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")
    end: str = Field(..., pattern=r"^\d{1,2}:\d{2}$")


class WeeklyScheduleRequest(BaseModel):
    """
    Full week of opening hours keyed by weekday.
    Missing days and empty lists are saved as closed.
    """
    weekly_schedule: Dict[str, List[TimeInterval]]

    def as_plain_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            day: [interval.model_dump() for interval in intervals]
            for day, intervals in self.weekly_schedule.items()
        }


# ============================================================================
# Exceptions
# ============================================================================

def _reject_null(v):
    """Optional in a PATCH body means 'may be omitted', not 'may be cleared'"""
    if v is None:
        raise ValueError("This field cannot be null")
    return v


def _encode_custom_schedule(v):
    """custom_schedule is stored as JSON text; accept objects and lists too"""
    if v is None or isinstance(v, str):
        return v
    return json.dumps(v)


class ExceptionCreateRequest(BaseModel):
    """Date-specific override of the weekly hours"""
    date: dt.date
    type: str
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    reason: Optional[str] = Field(None, max_length=500)
    appointment_type_id: Optional[UUID] = None
    custom_schedule: Optional[Union[str, Dict[str, Any], List[Dict[str, Any]]]] = None

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        if v not in ExceptionType.ALL:
            raise ValueError(f"type must be one of: {', '.join(ExceptionType.ALL)}")
        return v

    @field_validator('custom_schedule')
    @classmethod
    def encode_custom_schedule(cls, v):
        return _encode_custom_schedule(v)


class ExceptionUpdateRequest(BaseModel):
    """All fields optional - only send what you want to change"""
    date: Optional[dt.date] = None
    type: Optional[str] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    reason: Optional[str] = Field(None, max_length=500)
    appointment_type_id: Optional[UUID] = None
    custom_schedule: Optional[Union[str, Dict[str, Any], List[Dict[str, Any]]]] = None

    @field_validator('date', 'type')
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        if v is not None and v not in ExceptionType.ALL:
            raise ValueError(f"type must be one of: {', '.join(ExceptionType.ALL)}")
        return v

    @field_validator('custom_schedule')
    @classmethod
    def encode_custom_schedule(cls, v):
        return _encode_custom_schedule(v)


class ClosedMonthsRequest(BaseModel):
    """Months (1-12) of `year` on which the business is closed"""
    year: int = Field(..., ge=2000, le=2100)
    months: List[int] = Field(default_factory=list)

    @field_validator('months')
    @classmethod
    def validate_months(cls, v):
        for month in v:
            if not 1 <= month <= 12:
                raise ValueError('Months must be between 1 and 12')
        return sorted(set(v))


# ============================================================================
# Blocked dates
# ============================================================================

class BlockedDateCreateRequest(BaseModel):
    start_date: dt.date
    end_date: dt.date
    reason: Optional[str] = Field(None, max_length=500)
    is_all_day: bool = True

    @model_validator(mode='after')
    def check_range(self):
        if self.start_date > self.end_date:
            raise ValueError('start_date must not be after end_date')
        return self


class BlockedDateUpdateRequest(BaseModel):
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    reason: Optional[str] = Field(None, max_length=500)
    is_all_day: Optional[bool] = None

    @field_validator('start_date', 'end_date', 'is_all_day')
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)
