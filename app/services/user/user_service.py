# ============================================================================
# FILE: app/services/user/user_service.py
# Business owner accounts and their scheduling settings
# ============================================================================
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any
from uuid import UUID
import logging

from app.models.user import User
from app.utils.timezones import is_valid_timezone

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user operations."""

    @staticmethod
    def create_user(
            db: Session,
            email: str,
            name: str,
            business_name: Optional[str] = None,
            timezone: str = "UTC"
    ) -> User:
        """
        Create a new business owner.
        Raises ValueError if email already exists or the timezone is unknown.
        """
        email = email.lower().strip()
        existing_user = db.query(User).filter(User.email == email).first()
        if existing_user:
            raise ValueError("Email already registered")

        if not is_valid_timezone(timezone):
            raise ValueError(f"Unknown timezone: {timezone}")

        user = User(
            email=email,
            name=name,
            business_name=business_name,
            timezone=timezone,
            is_active=True
        )

        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"Created user {user.id} ({user.email})")
        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        return db.get(User, user_id)

    @staticmethod
    def update_settings(db: Session, user_id: UUID, updates: Dict[str, Any]) -> Optional[User]:
        """
        Update timezone, closed months and booking window.
        Returns None if the user does not exist.
        """
        user = db.get(User, user_id)
        if not user:
            return None

        if "timezone" in updates and not is_valid_timezone(updates["timezone"]):
            raise ValueError(f"Unknown timezone: {updates['timezone']}")

        if "closed_months" in updates and updates["closed_months"] is not None:
            months = sorted(set(updates["closed_months"]))
            if any(not 1 <= m <= 12 for m in months):
                raise ValueError("closed_months must contain month numbers 1-12")
            updates["closed_months"] = months

        start = updates.get("booking_window_start", user.booking_window_start)
        end = updates.get("booking_window_end", user.booking_window_end)
        if start and end and start > end:
            raise ValueError("booking_window_start must not be after booking_window_end")

        for key, value in updates.items():
            setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user
