"""Tests for the public slot routes."""

import uuid

from tests.conftest import MONDAY


class TestSlotRoutes:
    """Tests for GET /api/v1/public/slots."""

    def test_monday_slots(self, client, slot_params):
        """Nine to five with 30 minute appointments gives 16 UTC starts."""
        response = client.get("/api/v1/public/slots", params=slot_params)
        assert response.status_code == 200
        data = response.json()
        assert data["date"] == MONDAY
        assert len(data["slots"]) == 16
        assert data["slots"][0] == "2030-01-07T09:00:00+00:00"
        assert data["slots"][-1] == "2030-01-07T16:30:00+00:00"

    def test_display_in_customer_timezone(self, client, slot_params):
        """Display times follow the customer's zone; slots stay UTC."""
        response = client.get("/api/v1/public/slots", params={**slot_params, "timezone": "America/New_York"})
        assert response.status_code == 200
        data = response.json()
        assert data["timezone"] == "America/New_York"
        assert data["display_timezone"] == "America/New_York"
        assert data["slots"][0] == "2030-01-07T09:00:00+00:00"
        assert data["display"][0]["local_time"] == "2030-01-07T04:00:00-05:00"
        assert data["display"][0]["label"] == "4:00 AM"

    def test_unsupported_display_timezone_snaps(self, client, slot_params):
        """Valid zones outside the supported list report a snapped display zone."""
        response = client.get("/api/v1/public/slots", params={**slot_params, "timezone": "Asia/Kathmandu"})
        assert response.status_code == 200
        assert response.json()["display_timezone"] == "Etc/UTC"

    def test_invalid_timezone(self, client, slot_params):
        """Unknown IANA names are rejected."""
        response = client.get("/api/v1/public/slots", params={**slot_params, "timezone": "Mars/Olympus"})
        assert response.status_code == 400

    def test_closed_weekday(self, client, slot_params):
        """Tuesday was saved empty and has no slots."""
        response = client.get("/api/v1/public/slots", params={**slot_params, "date": "2030-01-08"})
        assert response.status_code == 200
        assert response.json()["slots"] == []

    def test_unknown_appointment_type(self, client, slot_params):
        """Unknown appointment types give 404."""
        response = client.get(
            "/api/v1/public/slots",
            params={**slot_params, "appointment_type_id": str(uuid.uuid4())}
        )
        assert response.status_code == 404

    def test_unknown_user(self, client, slot_params):
        response = client.get("/api/v1/public/slots", params={**slot_params, "user_id": str(uuid.uuid4())})
        assert response.status_code == 404

    def test_bad_date(self, client, slot_params):
        """Malformed dates fail validation."""
        response = client.get("/api/v1/public/slots", params={**slot_params, "date": "07/01/2030"})
        assert response.status_code == 422


class TestSlotRangeRoutes:
    """Tests for GET /api/v1/public/slots/range."""

    def test_range_only_lists_open_days(self, client, slot_params):
        """Across two weeks only the Mondays have slots."""
        params = {
            "user_id": slot_params["user_id"],
            "appointment_type_id": slot_params["appointment_type_id"],
            "start_date": "2030-01-06",
            "end_date": "2030-01-19",
        }
        response = client.get("/api/v1/public/slots/range", params=params)
        assert response.status_code == 200
        days = response.json()["days"]
        assert sorted(days.keys()) == ["2030-01-07", "2030-01-14"]
        assert len(days["2030-01-14"]) == 16

    def test_range_too_long(self, client, slot_params):
        params = {
            "user_id": slot_params["user_id"],
            "appointment_type_id": slot_params["appointment_type_id"],
            "start_date": "2030-01-01",
            "end_date": "2030-06-01",
        }
        response = client.get("/api/v1/public/slots/range", params=params)
        assert response.status_code == 400

    def test_range_reversed(self, client, slot_params):
        params = {
            "user_id": slot_params["user_id"],
            "appointment_type_id": slot_params["appointment_type_id"],
            "start_date": "2030-01-10",
            "end_date": "2030-01-01",
        }
        response = client.get("/api/v1/public/slots/range", params=params)
        assert response.status_code == 400
