# ============================================================================
# FILE: app/api/v1/dashboard/appointment_types.py
# Appointment type management - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Query, Path, status
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from app.config.database import get_db
from app.models.appointment_type import AppointmentType
from app.models.user import User
from app.api.dependencies import get_owner
from app.schemas.appointment_type import AppointmentTypeCreate, AppointmentTypeUpdate
from app.services.appointment_type.appointment_type_service import AppointmentTypeService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-appointment-types"])


def _appointment_type_to_response(appointment_type: AppointmentType) -> dict:
    data = appointment_type.to_dict()
    data["formatted_duration"] = appointment_type.formatted_duration
    return data


@router.get("/{user_id}/appointment-types")
def list_appointment_types(
        include_inactive: bool = Query(False, description="Include deactivated types"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    types = AppointmentTypeService.list_appointment_types(db, owner.id, include_inactive)
    return {
        "total": len(types),
        "appointment_types": [_appointment_type_to_response(t) for t in types]
    }


@router.post("/{user_id}/appointment-types", status_code=status.HTTP_201_CREATED)
def create_appointment_type(
        request: AppointmentTypeCreate,
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    try:
        data = request.model_dump(exclude_none=True)
        appointment_type = AppointmentTypeService.create_appointment_type(db, owner.id, data)
        return _appointment_type_to_response(appointment_type)

    except Exception as e:
        db.rollback()
        logger.error(f"Error creating appointment type for user {owner.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create appointment type")


@router.get("/{user_id}/appointment-types/{appointment_type_id}")
def get_appointment_type(
        appointment_type_id: UUID = Path(..., description="The appointment type ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    appointment_type = AppointmentTypeService.get_appointment_type(db, owner.id, appointment_type_id)
    if not appointment_type:
        raise HTTPException(status_code=404, detail="Appointment type not found")
    return _appointment_type_to_response(appointment_type)


@router.patch("/{user_id}/appointment-types/{appointment_type_id}")
def update_appointment_type(
        request: AppointmentTypeUpdate,
        appointment_type_id: UUID = Path(..., description="The appointment type ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    try:
        appointment_type = AppointmentTypeService.update_appointment_type(
            db, owner.id, appointment_type_id, request.model_dump(exclude_unset=True)
        )
        if not appointment_type:
            raise HTTPException(status_code=404, detail="Appointment type not found")
        return _appointment_type_to_response(appointment_type)

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating appointment type {appointment_type_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update appointment type")


@router.delete("/{user_id}/appointment-types/{appointment_type_id}")
def delete_appointment_type(
        appointment_type_id: UUID = Path(..., description="The appointment type ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """Deactivates the type; existing bookings keep their reference"""
    if not AppointmentTypeService.deactivate_appointment_type(db, owner.id, appointment_type_id):
        raise HTTPException(status_code=404, detail="Appointment type not found")
    return {"success": True, "deactivated_id": str(appointment_type_id)}
