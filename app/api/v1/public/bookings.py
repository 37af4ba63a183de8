# ============================================================================
# FILE: app/api/v1/public/bookings.py
# Public booking endpoints - customers book offered slots
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session
import logging

from app.config.database import get_db
from app.schemas.booking import BookingCreateRequest
from app.services.booking.booking_service import BookingService, SlotUnavailableError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings", tags=["public-bookings"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(
        request: BookingCreateRequest,
        db: Session = Depends(get_db)
):
    """
    Book a slot. The start time must be one of the slots currently offered,
    otherwise 409 is returned and the customer should pick again.
    """
    try:
        booking = BookingService.create_booking(
            db=db,
            user_id=request.user_id,
            appointment_type_id=request.appointment_type_id,
            customer_name=request.customer_name,
            customer_email=str(request.customer_email),
            appointment_date=request.appointment_date,
            notes=request.notes
        )
        return booking.to_dict()

    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except SlotUnavailableError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating booking for user {request.user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create booking")


@router.get("/{booking_token}")
def get_booking_by_token(
        booking_token: str = Path(..., min_length=8, max_length=64),
        db: Session = Depends(get_db)
):
    """Look up a booking from the token in the customer's confirmation link"""
    booking = BookingService.get_booking_by_token(db, booking_token)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking.to_dict()
