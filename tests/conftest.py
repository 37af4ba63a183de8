"""Shared fixtures: in-memory SQLite database and a FastAPI test client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import get_db
from app.main import create_app
from app.models import Base
from app.services.appointment_type.appointment_type_service import AppointmentTypeService
from app.services.availability.availability_service import AvailabilityService
from app.services.user.user_service import UserService

# 2030-01-07 is a Monday, far enough ahead that the wall clock never filters it
MONDAY = "2030-01-07"


@pytest.fixture
def db_session():
    """Fresh database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db_session):
    """Test client whose requests share the test's session."""
    app = create_app()

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner(db_session):
    """Owner in UTC, open Mondays 09:00-17:00 and closed the rest of the week."""
    user = UserService.create_user(db_session, email="owner@example.com", name="Owner", timezone="UTC")
    AvailabilityService.replace_weekly_availability(
        db_session, user.id, {"monday": [{"start": "09:00", "end": "17:00"}]}
    )
    return user


@pytest.fixture
def consultation(db_session, owner):
    """30 minute appointment type without buffers."""
    return AppointmentTypeService.create_appointment_type(
        db_session, owner.id, {"name": "Consultation", "duration": 30}
    )


@pytest.fixture
def slot_params(owner, consultation):
    """Query parameters for the Monday slot lookup."""
    return {
        "user_id": str(owner.id),
        "appointment_type_id": str(consultation.id),
        "date": MONDAY,
    }
