# ============================================================================
# app/services/appointment_type/appointment_type_service.py
# ============================================================================
"""Service for managing appointment types"""
from sqlalchemy.orm import Session
from typing import Optional, List, Dict, Any
from uuid import UUID
import logging

from app.models.appointment_type import AppointmentType

logger = logging.getLogger(__name__)


class AppointmentTypeService:
    """Handles appointment type operations"""

    @staticmethod
    def list_appointment_types(
            db: Session,
            user_id: UUID,
            include_inactive: bool = False
    ) -> List[AppointmentType]:
        query = db.query(AppointmentType).filter(AppointmentType.user_id == user_id)
        if not include_inactive:
            query = query.filter(AppointmentType.is_active == True)
        return query.order_by(AppointmentType.sort_order.asc(), AppointmentType.name.asc()).all()

    @staticmethod
    def get_appointment_type(
            db: Session,
            user_id: UUID,
            appointment_type_id: UUID
    ) -> Optional[AppointmentType]:
        return db.query(AppointmentType).filter(
            AppointmentType.id == appointment_type_id,
            AppointmentType.user_id == user_id
        ).first()

    @staticmethod
    def create_appointment_type(db: Session, user_id: UUID, data: Dict[str, Any]) -> AppointmentType:
        appointment_type = AppointmentType(user_id=user_id, is_active=True, **data)
        db.add(appointment_type)
        db.commit()
        db.refresh(appointment_type)

        logger.info(f"Created appointment type {appointment_type.id}: {appointment_type.name}")
        return appointment_type

    @staticmethod
    def update_appointment_type(
            db: Session,
            user_id: UUID,
            appointment_type_id: UUID,
            updates: Dict[str, Any]
    ) -> Optional[AppointmentType]:
        appointment_type = AppointmentTypeService.get_appointment_type(db, user_id, appointment_type_id)
        if not appointment_type:
            return None

        for key, value in updates.items():
            setattr(appointment_type, key, value)

        db.commit()
        db.refresh(appointment_type)
        return appointment_type

    @staticmethod
    def deactivate_appointment_type(db: Session, user_id: UUID, appointment_type_id: UUID) -> bool:
        """Soft delete: existing bookings keep pointing at the row"""
        appointment_type = AppointmentTypeService.get_appointment_type(db, user_id, appointment_type_id)
        if not appointment_type:
            return False

        appointment_type.is_active = False
        db.commit()
        logger.info(f"Deactivated appointment type {appointment_type_id}")
        return True
