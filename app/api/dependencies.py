# ============================================================================
# FILE: app/api/dependencies.py
# Shared route dependencies
# ============================================================================
from fastapi import Depends, HTTPException, Path, status
from sqlalchemy.orm import Session
from uuid import UUID

from app.config.database import get_db
from app.models.user import User
from app.services.user.user_service import UserService


def get_owner(
        user_id: UUID = Path(..., description="The business owner's user ID"),
        db: Session = Depends(get_db)
) -> User:
    """
    Dependency resolving the `{user_id}` path segment of owner routes.

    Usage in routes:
        @router.get("/{user_id}/bookings")
        def list_bookings(owner: User = Depends(get_owner)):
            ...

    Raises:
        HTTPException 404: If the user does not exist
    """
    user = UserService.get_user_by_id(db, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user
