"""
Unit tests for the clinic data client and the availability service.
"""

from datetime import date

import httpx
import pytest

from clinic_scheduling.exceptions import (
    ClinicNotFoundError,
    InvalidAvailabilityRequest,
    InvalidCalendarConfig,
)
from clinic_scheduling.models.calendar import Weekday
from clinic_scheduling.models.slot import UnavailabilityReason
from clinic_scheduling.services.availability import AvailabilityService
from clinic_scheduling.services.clinic_data import ClinicDataService

MONDAY = date(2026, 10, 19)

CLINIC_RECORD = {
    "id": 1,
    "name": "Clínica Sorriso",
    "working_days": ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday"],
    "work_start": "08:00",
    "work_end": "12:00",
    "has_lunch_break": False,
    "lunch_start": "12:00",
    "lunch_end": "13:00",
}

APPOINTMENTS = [
    {"id": 10, "clinic_id": 1, "scheduled_date": "2026-10-19T09:00:00",
     "duration_minutes": 60, "status": "confirmada"},
    {"id": 11, "clinic_id": 1, "scheduled_date": "2026-10-19T11:00:00",
     "duration_minutes": 30, "status": "cancelada_paciente"},
    {"id": 12, "clinic_id": 1, "scheduled_date": "2026-10-20T08:00:00",
     "duration_minutes": 30, "status": "agendada"},
]


def clinic_api(request: httpx.Request) -> httpx.Response:
    """Fake clinic management API."""
    if request.url.path == "/api/clinic/1/config":
        return httpx.Response(200, json=CLINIC_RECORD)
    if request.url.path == "/api/clinic/2/config":
        return httpx.Response(200, json={"work_start": "18:00", "work_end": "08:00"})
    if request.url.path.startswith("/api/clinic/"):
        return httpx.Response(404, json={"error": "Clinic not found"})
    if request.url.path == "/api/appointments":
        return httpx.Response(200, json=APPOINTMENTS)
    return httpx.Response(500, json={"error": "Internal server error"})


@pytest.fixture
async def clinic_data():
    service = ClinicDataService(transport=httpx.MockTransport(clinic_api))
    yield service
    await service.close()


class TestClinicDataService:
    """Test fetching clinic inputs."""

    async def test_get_clinic_config(self, clinic_data):
        config = await clinic_data.get_clinic_config(1)
        assert config.work_end == 720
        assert config.has_lunch_break is False
        assert Weekday.SATURDAY in config.working_days

    async def test_unknown_clinic(self, clinic_data):
        with pytest.raises(ClinicNotFoundError) as exc_info:
            await clinic_data.get_clinic_config(99)
        assert exc_info.value.clinic_id == 99

    async def test_malformed_clinic_config(self, clinic_data):
        with pytest.raises(InvalidCalendarConfig):
            await clinic_data.get_clinic_config(2)

    async def test_get_appointments(self, clinic_data):
        appointments = await clinic_data.get_appointments(1)
        assert len(appointments) == 3

    async def test_get_day_bookings_filters(self, clinic_data):
        bookings = await clinic_data.get_day_bookings(1, MONDAY)
        assert [(b.start_minute, b.duration_minutes) for b in bookings] == [(540, 60)]

    async def test_server_error_propagates(self):
        def failing(request):
            return httpx.Response(500)

        service = ClinicDataService(transport=httpx.MockTransport(failing))
        with pytest.raises(httpx.HTTPStatusError):
            await service.get_appointments(1)
        await service.close()

    async def test_connection_error_propagates(self):
        def unreachable(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = ClinicDataService(transport=httpx.MockTransport(unreachable))
        with pytest.raises(httpx.RequestError):
            await service.get_clinic_config(1)
        await service.close()

    async def test_close_is_idempotent(self, clinic_data):
        await clinic_data.get_appointments(1)
        await clinic_data.close()
        await clinic_data.close()


class TestAvailabilityService:
    """Test fetching and computing together."""

    async def test_get_day_availability(self, clinic_data):
        service = AvailabilityService(clinic_data=clinic_data)
        day = await service.get_day_availability(1, MONDAY, 30)

        assert day.target_date == MONDAY
        assert [s.start_minute for s in day.slots] == [480, 510, 540, 570, 600, 630, 660, 690]
        blocked = [s.start_minute for s in day.slots if not s.available]
        assert blocked == [540, 570]
        assert all(s.reason == UnavailabilityReason.BOOKING_CONFLICT for s in day.slots if not s.available)
        assert day.has_availability is True

    async def test_saturday_is_working_day_for_this_clinic(self, clinic_data):
        service = AvailabilityService(clinic_data=clinic_data)
        day = await service.get_day_availability(1, date(2026, 10, 24), 30)

        assert day.is_working_day is True
        assert all(slot.available for slot in day.slots)

    async def test_invalid_duration(self, clinic_data):
        service = AvailabilityService(clinic_data=clinic_data)
        with pytest.raises(InvalidAvailabilityRequest):
            await service.get_day_availability(1, MONDAY, 0)

    async def test_unknown_clinic(self, clinic_data):
        service = AvailabilityService(clinic_data=clinic_data)
        with pytest.raises(ClinicNotFoundError):
            await service.get_day_availability(99, MONDAY, 30)
