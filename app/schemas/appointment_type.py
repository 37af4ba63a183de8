"""
Pydantic schemas for appointment types
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class AppointmentTypeCreate(BaseModel):
    """Request model for creating an appointment type"""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    duration: int = Field(..., gt=0, le=24 * 60, description="Duration in minutes")
    buffer_time_before: int = Field(default=0, ge=0, le=24 * 60)
    buffer_time_after: int = Field(default=0, ge=0, le=24 * 60)
    price: int = Field(default=0, ge=0, description="Price in cents")
    color: Optional[str] = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")
    sort_order: int = Field(default=0)


class AppointmentTypeUpdate(BaseModel):
    """Request model for updating an appointment type"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    buffer_time_before: Optional[int] = Field(None, ge=0, le=24 * 60)
    buffer_time_after: Optional[int] = Field(None, ge=0, le=24 * 60)
    price: Optional[int] = Field(None, ge=0)
    color: Optional[str] = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator('name', 'duration', 'is_active')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("This field cannot be null")
        return v
