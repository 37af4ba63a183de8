# ============================================================================
# FILE: app/api/v1/dashboard/availability.py
# Owner endpoints for weekly hours, exceptions, closed months and blocked dates
# IMPORTANT: Specific routes MUST come before parameterized routes
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, Query, Path, status
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID
import logging

from app.config.database import get_db
from app.models.user import User
from app.api.dependencies import get_owner
from app.schemas.availability import (
    BlockedDateCreateRequest,
    BlockedDateUpdateRequest,
    ClosedMonthsRequest,
    ExceptionCreateRequest,
    ExceptionUpdateRequest,
    WeeklyScheduleRequest,
)
from app.services.availability.availability_service import AvailabilityService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-availability"])


def _format_window(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


# ========== WEEKLY HOURS ==========

@router.get("/{user_id}/availability/weekly")
def get_weekly_availability(
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """Weekly opening hours grouped by weekday"""
    return {
        "user_id": str(owner.id),
        "timezone": owner.timezone,
        "weekly_schedule": AvailabilityService.get_weekly_availability(db, owner.id)
    }


@router.put("/{user_id}/availability/weekly")
def replace_weekly_availability(
        request: WeeklyScheduleRequest,
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """
    Replace the whole week. Days left out or sent with an empty list are closed.
    """
    try:
        AvailabilityService.replace_weekly_availability(db, owner.id, request.as_plain_dict())
        return {
            "success": True,
            "user_id": str(owner.id),
            "weekly_schedule": AvailabilityService.get_weekly_availability(db, owner.id)
        }

    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving weekly availability for user {owner.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save weekly availability")


@router.get("/{user_id}/availability/effective")
def get_effective_schedule(
        date: date = Query(..., description="Calendar date in the business timezone"),
        appointment_type_id: Optional[UUID] = Query(None),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """Which rule decides the hours of `date`, before bookings are subtracted"""
    schedule = AvailabilityService.get_effective_schedule(db, owner.id, appointment_type_id, date)
    if schedule is None:
        raise HTTPException(status_code=404, detail="User not found")

    return {
        "date": date.isoformat(),
        "source": schedule.source,
        "is_open": schedule.is_open,
        "windows": [
            {"start": _format_window(start), "end": _format_window(end)}
            for start, end in schedule.windows
        ]
    }


# ========== EXCEPTIONS ==========

@router.get("/{user_id}/availability/exceptions")
def list_exceptions(
        start_date: Optional[date] = Query(None, description="Only exceptions on or after this date"),
        end_date: Optional[date] = Query(None, description="Only exceptions on or before this date"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    exceptions = AvailabilityService.list_exceptions(db, owner.id, start_date, end_date)
    return {
        "total": len(exceptions),
        "exceptions": [e.to_dict() for e in exceptions]
    }


@router.post("/{user_id}/availability/exceptions", status_code=status.HTTP_201_CREATED)
def create_exception(
        request: ExceptionCreateRequest,
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    try:
        exception = AvailabilityService.create_exception(db, owner.id, request.model_dump())
        return exception.to_dict()

    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating exception for user {owner.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create exception")


@router.put("/{user_id}/availability/closed-months")
def set_closed_months(
        request: ClosedMonthsRequest,
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """Replace the closed months of one year"""
    try:
        created = AvailabilityService.set_closed_months(db, owner.id, request.year, request.months)
        return {
            "year": request.year,
            "months": request.months,
            "exceptions": [e.to_dict() for e in created]
        }

    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving closed months for user {owner.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save closed months")


@router.patch("/{user_id}/availability/exceptions/{exception_id}")
def update_exception(
        request: ExceptionUpdateRequest,
        exception_id: UUID = Path(..., description="The exception ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    try:
        exception = AvailabilityService.update_exception(
            db, owner.id, exception_id, request.model_dump(exclude_unset=True)
        )
        if not exception:
            raise HTTPException(status_code=404, detail="Exception not found")
        return exception.to_dict()

    except HTTPException:
        raise
    except LookupError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating exception {exception_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update exception")


@router.delete("/{user_id}/availability/exceptions/{exception_id}")
def delete_exception(
        exception_id: UUID = Path(..., description="The exception ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    if not AvailabilityService.delete_exception(db, owner.id, exception_id):
        raise HTTPException(status_code=404, detail="Exception not found")
    return {"success": True, "deleted_id": str(exception_id)}


# ========== BLOCKED DATES ==========

@router.get("/{user_id}/blocked-dates")
def list_blocked_dates(
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    blocked = AvailabilityService.list_blocked_dates(db, owner.id)
    return {
        "total": len(blocked),
        "blocked_dates": [b.to_dict() for b in blocked]
    }


@router.post("/{user_id}/blocked-dates", status_code=status.HTTP_201_CREATED)
def create_blocked_date(
        request: BlockedDateCreateRequest,
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    try:
        blocked = AvailabilityService.create_blocked_date(db, owner.id, request.model_dump())
        return blocked.to_dict()

    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating blocked date for user {owner.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create blocked date")


@router.patch("/{user_id}/blocked-dates/{blocked_date_id}")
def update_blocked_date(
        request: BlockedDateUpdateRequest,
        blocked_date_id: UUID = Path(..., description="The blocked date ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    try:
        blocked = AvailabilityService.update_blocked_date(
            db, owner.id, blocked_date_id, request.model_dump(exclude_unset=True)
        )
        if not blocked:
            raise HTTPException(status_code=404, detail="Blocked date not found")
        return blocked.to_dict()

    except HTTPException:
        raise
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating blocked date {blocked_date_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update blocked date")


@router.delete("/{user_id}/blocked-dates/{blocked_date_id}")
def delete_blocked_date(
        blocked_date_id: UUID = Path(..., description="The blocked date ID"),
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    if not AvailabilityService.delete_blocked_date(db, owner.id, blocked_date_id):
        raise HTTPException(status_code=404, detail="Blocked date not found")
    return {"success": True, "deleted_id": str(blocked_date_id)}
