# ===== seed_availability.py =====
"""
Create a demo owner with Mon-Fri 9-5 hours, one appointment type and a
couple of exceptions. Run with: python -m app.seed_availability
"""
import logging
from datetime import date

from app.config.database import SessionLocal, create_tables
from app.services.appointment_type.appointment_type_service import AppointmentTypeService
from app.services.availability.availability_service import AvailabilityService
from app.services.user.user_service import UserService
from app.utils.my_logging import setup_logging

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.com"


def seed_availability(year=None):
    year = year or date.today().year
    db = SessionLocal()

    try:
        user = UserService.create_user(
            db,
            email=DEMO_EMAIL,
            name="Demo Owner",
            business_name="Demo Studio",
            timezone="America/New_York"
        )

        # 1. Mon-Fri 9-5, with a lunch break on Wednesday
        weekday_hours = [{"start": "09:00", "end": "17:00"}]
        AvailabilityService.replace_weekly_availability(db, user.id, {
            "monday": weekday_hours,
            "tuesday": weekday_hours,
            "wednesday": [{"start": "09:00", "end": "12:00"}, {"start": "13:00", "end": "17:00"}],
            "thursday": weekday_hours,
            "friday": weekday_hours,
        })

        # 2. Appointment type with a 15 minute cleanup buffer
        consultation = AppointmentTypeService.create_appointment_type(db, user.id, {
            "name": "30min Consultation",
            "duration": 30,
            "buffer_time_after": 15,
        })

        # 3. Day off and a half day
        AvailabilityService.create_exception(db, user.id, {
            "date": date(year, 7, 4),
            "type": "unavailable",
            "reason": "Holiday",
        })
        AvailabilityService.create_exception(db, user.id, {
            "date": date(year, 12, 24),
            "type": "custom_hours",
            "custom_schedule": '{"start": "10:00", "end": "14:00"}',
            "reason": "Half day",
        })

        logger.info(f"Seeded user {user.id} with appointment type {consultation.id}")

    except ValueError as e:
        db.rollback()
        logger.error(f"Error seeding availability: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    create_tables()
    seed_availability()
