"""Tests for owner availability routes: weekly hours, exceptions, closed months, blocked dates."""

import uuid

import pytest

from tests.conftest import MONDAY


def slot_count(client, params, day=MONDAY):
    response = client.get("/api/v1/public/slots", params={**params, "date": day})
    assert response.status_code == 200
    return len(response.json()["slots"])


def effective(client, owner, day=MONDAY):
    response = client.get(f"/api/v1/users/{owner.id}/availability/effective", params={"date": day})
    assert response.status_code == 200
    return response.json()


class TestWeeklyRoutes:
    """Tests for /availability/weekly."""

    def test_get_weekly(self, client, owner):
        response = client.get(f"/api/v1/users/{owner.id}/availability/weekly")
        assert response.status_code == 200
        schedule = response.json()["weekly_schedule"]
        assert schedule["monday"] == [{"start": "09:00", "end": "17:00"}]
        assert schedule["tuesday"] == []
        assert list(schedule.keys())[0] == "sunday"

    def test_replace_weekly(self, client, owner, slot_params):
        """Abbreviated keys and a 24:00 end are accepted."""
        response = client.put(
            f"/api/v1/users/{owner.id}/availability/weekly",
            json={"weekly_schedule": {
                "Mon": [{"start": "09:00", "end": "12:00"}, {"start": "13:00", "end": "15:00"}],
                "tue": [{"start": "20:00", "end": "24:00"}],
            }}
        )
        assert response.status_code == 200
        schedule = response.json()["weekly_schedule"]
        assert schedule["monday"] == [{"start": "09:00", "end": "12:00"}, {"start": "13:00", "end": "15:00"}]
        assert schedule["tuesday"] == [{"start": "20:00", "end": "24:00"}]

        assert slot_count(client, slot_params) == 10
        assert slot_count(client, slot_params, day="2030-01-08") == 8

    def test_emptied_day_stays_closed(self, client, owner, slot_params):
        """Saving a day with no intervals closes it instead of falling back to open."""
        response = client.put(
            f"/api/v1/users/{owner.id}/availability/weekly",
            json={"weekly_schedule": {"monday": []}}
        )
        assert response.status_code == 200
        assert slot_count(client, slot_params) == 0
        assert effective(client, owner)["source"] == "weekly_closed"

    def test_start_after_end_rejected(self, client, owner):
        response = client.put(
            f"/api/v1/users/{owner.id}/availability/weekly",
            json={"weekly_schedule": {"monday": [{"start": "17:00", "end": "09:00"}]}}
        )
        assert response.status_code == 400

    def test_unknown_weekday_rejected(self, client, owner):
        response = client.put(
            f"/api/v1/users/{owner.id}/availability/weekly",
            json={"weekly_schedule": {"funday": [{"start": "09:00", "end": "10:00"}]}}
        )
        assert response.status_code == 400

    def test_failed_replace_keeps_old_week(self, client, owner, slot_params):
        client.put(
            f"/api/v1/users/{owner.id}/availability/weekly",
            json={"weekly_schedule": {"monday": [{"start": "10:00", "end": "09:00"}]}}
        )
        assert slot_count(client, slot_params) == 16

    def test_unknown_user(self, client):
        response = client.get(f"/api/v1/users/{uuid.uuid4()}/availability/weekly")
        assert response.status_code == 404


class TestExceptionRoutes:
    """Tests for /availability/exceptions and /availability/closed-months."""

    def test_unavailable_day(self, client, owner, slot_params):
        response = client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "unavailable", "reason": "Vacation"}
        )
        assert response.status_code == 201
        assert slot_count(client, slot_params) == 0
        assert effective(client, owner)["source"] == "unavailable_exception"

    def test_custom_hours_from_schedule_object(self, client, owner, slot_params):
        """custom_schedule may be sent as a JSON object."""
        response = client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "custom_hours", "custom_schedule": {"start": "10:00", "end": "12:00"}}
        )
        assert response.status_code == 201
        assert slot_count(client, slot_params) == 4

        result = effective(client, owner)
        assert result["source"] == "exception_override"
        assert result["windows"] == [{"start": "10:00", "end": "12:00"}]

    def test_special_availability_opens_closed_day(self, client, owner, slot_params):
        """Tuesday is closed weekly but a special day opens it."""
        client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": "2030-01-08", "type": "special_availability", "start_time": "08:00", "end_time": "09:00"}
        )
        assert slot_count(client, slot_params, day="2030-01-08") == 2

    def test_invalid_type(self, client, owner):
        response = client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "holiday"}
        )
        assert response.status_code == 422

    def test_half_time_range_rejected(self, client, owner):
        response = client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "custom_hours", "start_time": "10:00"}
        )
        assert response.status_code == 400

    def test_foreign_appointment_type(self, client, owner):
        response = client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "unavailable", "appointment_type_id": str(uuid.uuid4())}
        )
        assert response.status_code == 404

    def test_scoped_exception(self, client, owner, slot_params, consultation):
        """An exception scoped to another type leaves this type open."""
        other = client.post(
            f"/api/v1/users/{owner.id}/appointment-types",
            json={"name": "Long session", "duration": 60}
        ).json()
        client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "unavailable", "appointment_type_id": other["id"]}
        )
        assert slot_count(client, slot_params) == 16
        assert slot_count(client, {**slot_params, "appointment_type_id": other["id"]}) == 0

    def test_update_and_delete(self, client, owner, slot_params):
        created = client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "unavailable"}
        ).json()

        response = client.patch(
            f"/api/v1/users/{owner.id}/availability/exceptions/{created['id']}",
            json={"type": "custom_hours", "start_time": "09:00", "end_time": "10:00"}
        )
        assert response.status_code == 200
        assert slot_count(client, slot_params) == 2

        response = client.delete(f"/api/v1/users/{owner.id}/availability/exceptions/{created['id']}")
        assert response.status_code == 200
        assert slot_count(client, slot_params) == 16

        response = client.delete(f"/api/v1/users/{owner.id}/availability/exceptions/{created['id']}")
        assert response.status_code == 404

    @pytest.mark.parametrize("payload", [{"date": None}, {"type": None}])
    def test_update_rejects_null_required_fields(self, client, owner, payload):
        """Explicit nulls for date or type are a validation error, not a server error."""
        created = client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "unavailable"}
        ).json()
        response = client.patch(
            f"/api/v1/users/{owner.id}/availability/exceptions/{created['id']}",
            json=payload
        )
        assert response.status_code == 422

    def test_list_exceptions(self, client, owner):
        for day in ("2030-01-07", "2030-02-04"):
            client.post(
                f"/api/v1/users/{owner.id}/availability/exceptions",
                json={"date": day, "type": "unavailable"}
            )
        response = client.get(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            params={"start_date": "2030-02-01"}
        )
        assert response.json()["total"] == 1

    def test_closed_months(self, client, owner, slot_params):
        response = client.put(
            f"/api/v1/users/{owner.id}/availability/closed-months",
            json={"year": 2030, "months": [1]}
        )
        assert response.status_code == 200
        assert len(response.json()["exceptions"]) == 1
        assert slot_count(client, slot_params) == 0
        assert effective(client, owner)["source"] == "closed_month"

        # January 2031 is unaffected
        assert slot_count(client, slot_params, day="2031-01-06") == 16

        # Replacing the year reopens January
        client.put(
            f"/api/v1/users/{owner.id}/availability/closed-months",
            json={"year": 2030, "months": [2]}
        )
        assert slot_count(client, slot_params) == 16

    def test_closed_months_validation(self, client, owner):
        response = client.put(
            f"/api/v1/users/{owner.id}/availability/closed-months",
            json={"year": 2030, "months": [13]}
        )
        assert response.status_code == 422


class TestBlockedDateRoutes:
    """Tests for /blocked-dates."""

    def test_block_range(self, client, owner, slot_params):
        response = client.post(
            f"/api/v1/users/{owner.id}/blocked-dates",
            json={"start_date": "2030-01-05", "end_date": "2030-01-09", "reason": "Holiday"}
        )
        assert response.status_code == 201
        assert slot_count(client, slot_params) == 0
        assert slot_count(client, slot_params, day="2030-01-14") == 16
        assert effective(client, owner)["source"] == "blocked_date"

    def test_custom_hours_beat_blocked_date(self, client, owner, slot_params):
        client.post(
            f"/api/v1/users/{owner.id}/blocked-dates",
            json={"start_date": MONDAY, "end_date": MONDAY}
        )
        client.post(
            f"/api/v1/users/{owner.id}/availability/exceptions",
            json={"date": MONDAY, "type": "custom_hours", "start_time": "10:00", "end_time": "11:00"}
        )
        assert slot_count(client, slot_params) == 2

    def test_reversed_range_rejected(self, client, owner):
        response = client.post(
            f"/api/v1/users/{owner.id}/blocked-dates",
            json={"start_date": "2030-01-09", "end_date": "2030-01-05"}
        )
        assert response.status_code == 422

    def test_update_list_delete(self, client, owner, slot_params):
        created = client.post(
            f"/api/v1/users/{owner.id}/blocked-dates",
            json={"start_date": "2030-01-14", "end_date": "2030-01-14"}
        ).json()

        response = client.patch(
            f"/api/v1/users/{owner.id}/blocked-dates/{created['id']}",
            json={"start_date": MONDAY}
        )
        assert response.status_code == 200
        assert slot_count(client, slot_params) == 0

        response = client.patch(
            f"/api/v1/users/{owner.id}/blocked-dates/{created['id']}",
            json={"start_date": "2030-02-01"}
        )
        assert response.status_code == 400

        assert client.get(f"/api/v1/users/{owner.id}/blocked-dates").json()["total"] == 1
        assert client.delete(f"/api/v1/users/{owner.id}/blocked-dates/{created['id']}").status_code == 200
        assert slot_count(client, slot_params) == 16

    @pytest.mark.parametrize("payload", [{"start_date": None}, {"end_date": None}, {"is_all_day": None}])
    def test_update_rejects_null(self, client, owner, payload):
        created = client.post(
            f"/api/v1/users/{owner.id}/blocked-dates",
            json={"start_date": "2030-01-14", "end_date": "2030-01-14"}
        ).json()
        response = client.patch(
            f"/api/v1/users/{owner.id}/blocked-dates/{created['id']}",
            json=payload
        )
        assert response.status_code == 422


class TestAppointmentTypeRoutes:
    """Tests for /appointment-types."""

    def test_create_and_list(self, client, owner, consultation):
        response = client.post(
            f"/api/v1/users/{owner.id}/appointment-types",
            json={"name": "Deep dive", "duration": 90, "buffer_time_after": 10}
        )
        assert response.status_code == 201
        assert response.json()["formatted_duration"] == "1h 30m"

        listed = client.get(f"/api/v1/users/{owner.id}/appointment-types").json()
        assert listed["total"] == 2

    def test_invalid_duration(self, client, owner):
        response = client.post(
            f"/api/v1/users/{owner.id}/appointment-types",
            json={"name": "Broken", "duration": 0}
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("payload", [{"name": None}, {"duration": None}, {"is_active": None}])
    def test_update_rejects_null(self, client, owner, consultation, payload):
        response = client.patch(
            f"/api/v1/users/{owner.id}/appointment-types/{consultation.id}",
            json=payload
        )
        assert response.status_code == 422

    def test_buffers_change_slots(self, client, owner, consultation, slot_params):
        """With a 30 minute buffer after, a booking blocks the following slot too."""
        client.patch(
            f"/api/v1/users/{owner.id}/appointment-types/{consultation.id}",
            json={"buffer_time_after": 30}
        )
        client.post("/api/v1/public/bookings", json={
            "user_id": str(owner.id),
            "appointment_type_id": str(consultation.id),
            "appointment_date": "2030-01-07T10:00:00Z",
            "customer_name": "Jane",
            "customer_email": "jane@example.com",
        })
        response = client.get("/api/v1/public/slots", params=slot_params)
        slots = response.json()["slots"]
        assert "2030-01-07T10:30:00+00:00" not in slots
        assert "2030-01-07T11:00:00+00:00" in slots

    def test_deactivate(self, client, owner, consultation, slot_params):
        response = client.delete(f"/api/v1/users/{owner.id}/appointment-types/{consultation.id}")
        assert response.status_code == 200

        listed = client.get(f"/api/v1/users/{owner.id}/appointment-types").json()
        assert listed["total"] == 0
        listed = client.get(
            f"/api/v1/users/{owner.id}/appointment-types",
            params={"include_inactive": True}
        ).json()
        assert listed["total"] == 1

        response = client.get("/api/v1/public/slots", params=slot_params)
        assert response.status_code == 404

    def test_get_unknown(self, client, owner):
        response = client.get(f"/api/v1/users/{owner.id}/appointment-types/{uuid.uuid4()}")
        assert response.status_code == 404


class TestUserRoutes:
    """Tests for /users."""

    def test_create_user(self, client):
        response = client.post("/api/v1/users", json={
            "email": "New@Example.com",
            "name": "New Owner",
            "timezone": "Europe/Berlin",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new@example.com"
        assert data["timezone"] == "Europe/Berlin"

    def test_duplicate_email(self, client, owner):
        response = client.post("/api/v1/users", json={"email": "owner@example.com", "name": "Again"})
        assert response.status_code == 400

    @pytest.mark.parametrize("payload", [
        {"timezone": "Mars/Olympus"},
        {"closed_months": [0]},
        {"booking_window_days": -1},
        {"name": None},
        {"timezone": None},
    ])
    def test_invalid_settings(self, client, owner, payload):
        response = client.patch(f"/api/v1/users/{owner.id}", json=payload)
        assert response.status_code == 422

    def test_reversed_booking_window(self, client, owner):
        response = client.patch(f"/api/v1/users/{owner.id}", json={
            "booking_window_start": "2030-02-01",
            "booking_window_end": "2030-01-01",
        })
        assert response.status_code == 400

    def test_timezone_moves_slots(self, client, owner, slot_params):
        """09:00 in Tokyo is 00:00 UTC."""
        response = client.patch(f"/api/v1/users/{owner.id}", json={"timezone": "Asia/Tokyo"})
        assert response.status_code == 200
        slots = client.get("/api/v1/public/slots", params=slot_params).json()["slots"]
        assert slots[0] == "2030-01-07T00:00:00+00:00"

    def test_closed_months_setting(self, client, owner, slot_params):
        client.patch(f"/api/v1/users/{owner.id}", json={"closed_months": [1]})
        assert slot_count(client, slot_params) == 0

    def test_booking_window_days(self, client, owner, slot_params):
        """Days beyond the booking window have no slots."""
        client.patch(f"/api/v1/users/{owner.id}", json={"booking_window_days": 30})
        assert slot_count(client, slot_params) == 0

    def test_booking_window_date(self, client, owner, slot_params):
        """Nothing after the last bookable date is offered."""
        response = client.patch(f"/api/v1/users/{owner.id}", json={"booking_window_date": "2030-01-06"})
        assert response.status_code == 200
        assert response.json()["booking_window_date"] == "2030-01-06"
        assert slot_count(client, slot_params) == 0

        client.patch(f"/api/v1/users/{owner.id}", json={"booking_window_date": MONDAY})
        assert slot_count(client, slot_params) == 16

    def test_deactivated_owner(self, client, db_session, owner, slot_params):
        """A deactivated owner can still manage settings but offers no public slots."""
        owner.is_active = False
        db_session.commit()

        response = client.get(f"/api/v1/users/{owner.id}")
        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert client.get(f"/api/v1/users/{owner.id}/availability/weekly").status_code == 200

        response = client.get("/api/v1/public/slots", params=slot_params)
        assert response.status_code == 404

    def test_get_user(self, client, owner):
        response = client.get(f"/api/v1/users/{owner.id}")
        assert response.status_code == 200
        assert response.json()["timezone"] == "UTC"
        assert client.get(f"/api/v1/users/{uuid.uuid4()}").status_code == 404
