# ============================================================================
# FILE: app/api/v1/public/slots.py
# Public slot lookup - no authentication, thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from datetime import date
from uuid import UUID
import logging

from app.config.database import get_db
from app.services.availability.availability_service import AvailabilityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/slots", tags=["public-slots"])


@router.get("")
def get_available_slots(
        user_id: UUID = Query(..., description="The business owner's user ID"),
        appointment_type_id: UUID = Query(..., description="The appointment type to book"),
        date: date = Query(..., description="Calendar date in the business timezone (YYYY-MM-DD)"),
        timezone: str = Query("UTC", description="Customer IANA timezone, used for display only"),
        db: Session = Depends(get_db)
):
    """
    Get bookable start times for one day.
    Slots are UTC instants; `display` carries the same instants in the customer's timezone.
    """
    try:
        slots = AvailabilityService.get_slots(
            db=db,
            user_id=user_id,
            appointment_type_id=appointment_type_id,
            day=date,
            customer_timezone=timezone
        )
        if slots is None:
            raise HTTPException(status_code=404, detail="User or appointment type not found")

        display = AvailabilityService.format_for_display(slots, timezone)
        return {
            "date": date.isoformat(),
            "timezone": display["timezone"],
            "display_timezone": display["display_timezone"],
            "slots": [slot.isoformat() for slot in slots],
            "display": display["display"]
        }

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error computing slots for user {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to compute available slots")


@router.get("/range")
def get_available_days(
        user_id: UUID = Query(..., description="The business owner's user ID"),
        appointment_type_id: UUID = Query(..., description="The appointment type to book"),
        start_date: date = Query(..., description="First day, business timezone"),
        end_date: date = Query(..., description="Last day (inclusive), business timezone"),
        timezone: str = Query("UTC", description="Customer IANA timezone, used for display only"),
        db: Session = Depends(get_db)
):
    """
    Slots for a date range, for month views. Days without any slot are left out.
    """
    try:
        display = AvailabilityService.format_for_display([], timezone)
        days = AvailabilityService.get_slots_for_range(
            db=db,
            user_id=user_id,
            appointment_type_id=appointment_type_id,
            start_date=start_date,
            end_date=end_date
        )
        if days is None:
            raise HTTPException(status_code=404, detail="User or appointment type not found")

        return {
            "timezone": display["timezone"],
            "display_timezone": display["display_timezone"],
            "days": {
                day: [slot.isoformat() for slot in slots]
                for day, slots in days.items()
            }
        }

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error computing slot range for user {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to compute available slots")
