# ============================================================================
# FILE: app/api/v1/dashboard/users.py
# Business owner accounts and scheduling settings - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from app.config.database import get_db
from app.models.user import User
from app.api.dependencies import get_owner
from app.schemas.user import UserCreateRequest, UserSettingsUpdate
from app.services.user.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-users"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
        request: UserCreateRequest,
        db: Session = Depends(get_db)
):
    """Create a business owner"""
    try:
        user = UserService.create_user(
            db=db,
            email=str(request.email),
            name=request.name,
            business_name=request.business_name,
            timezone=request.timezone
        )
        return user.to_dict()

    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating user: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.get("/{user_id}")
def get_user(owner: User = Depends(get_owner)):
    """Get a business owner and their scheduling settings"""
    return owner.to_dict()


@router.patch("/{user_id}")
def update_user_settings(
        request: UserSettingsUpdate,
        owner: User = Depends(get_owner),
        db: Session = Depends(get_db)
):
    """
    Update timezone, closed months and booking window.
    Only the fields present in the body are changed.
    """
    try:
        updates = request.model_dump(exclude_unset=True)
        user = UserService.update_settings(db, owner.id, updates)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        logger.info(f"Updated settings for user {owner.id}: {', '.join(updates.keys()) or 'nothing'}")
        return user.to_dict()

    except HTTPException:
        raise
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating user {owner.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update user")
