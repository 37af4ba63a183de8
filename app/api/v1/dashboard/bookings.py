# ============================================================================
# FILE: app/api/v1/dashboard/bookings.py
# Owner booking management - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Query, Path
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID
import logging

from app.config.database import get_db
from app.models.user import User
from app.api.dependencies import get_owner
from app.schemas.booking import BookingRescheduleRequest
from app.services.booking.booking_service import BookingService, SlotUnavailableError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-bookings"])


@router.get("/{user_id}/bookings")
def list_bookings(
        start_date: Optional[date] = Query(None, description="Filter bookings on or after this date (UTC)"),
        end_date: Optional[date] = Query(None, description="Filter bookings on or before this date (UTC)"),
        status: Optional[str] = Query(None, description="Filter by status (confirmed, pending, cancelled)"),
        skip: int = Query(0, ge=0, description="Number of records to skip"),
        limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """Get a page of the owner's bookings ordered by start time"""
    return BookingService.list_bookings(
        db=db,
        user_id=owner.id,
        start_date=start_date,
        end_date=end_date,
        status=status,
        skip=skip,
        limit=limit
    )


@router.get("/{user_id}/bookings/{booking_id}")
def get_booking(
        booking_id: UUID = Path(..., description="The booking ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    booking = BookingService.get_booking(db, owner.id, booking_id)
    if not booking:
        raise HTTPException(
            status_code=404,
            detail="Booking not found or you don't have access to it"
        )
    return booking.to_dict()


@router.post("/{user_id}/bookings/{booking_id}/cancel")
def cancel_booking(
        booking_id: UUID = Path(..., description="The booking ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """Cancel a booking. Its time becomes bookable again."""
    try:
        booking = BookingService.cancel_booking(db, owner.id, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error cancelling booking {booking_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to cancel booking")


@router.post("/{user_id}/bookings/{booking_id}/reschedule")
def reschedule_booking(
        request: BookingRescheduleRequest,
        booking_id: UUID = Path(..., description="The booking ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """Move a booking to another offered slot"""
    try:
        booking = BookingService.reschedule_booking(
            db=db,
            user_id=owner.id,
            booking_id=booking_id,
            appointment_date=request.appointment_date
        )
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking.to_dict()

    except HTTPException:
        raise
    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except SlotUnavailableError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error rescheduling booking {booking_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to reschedule booking")
