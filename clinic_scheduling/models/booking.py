"""
Booking-related data models.
"""

from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, Field

from clinic_scheduling.config import CANCELLED_APPOINTMENT_STATUSES, get_settings
from clinic_scheduling.models.calendar import format_clock


class ExistingBooking(BaseModel):
    """
    A confirmed appointment occupying clinic time on one day.
    """

    booking_date: date = Field(description="Clinic-local calendar date")
    start_minute: int = Field(ge=0, lt=24 * 60, description="Start, minutes since midnight")
    duration_minutes: int = Field(gt=0, description="Appointment length in minutes")

    @property
    def end_minute(self) -> int:
        """Minute at which the booking frees the calendar."""
        return self.start_minute + self.duration_minutes

    @property
    def formatted_time(self) -> str:
        """Get human-readable time range."""
        return f"{format_clock(self.start_minute)} - {format_clock(self.end_minute)}"

    def overlaps(self, start_minute: int, end_minute: int) -> bool:
        """Half-open overlap test; shared endpoints do not count."""
        return start_minute < self.end_minute and end_minute > self.start_minute

    @classmethod
    def from_appointment(cls, appointment: Mapping[str, Any]) -> Optional["ExistingBooking"]:
        """
        Convert a stored appointment record.

        The scheduled timestamp is read as clinic-local wall-clock time.
        Returns None for records that have not been scheduled yet.

        Raises:
            ValueError: If the timestamp or the duration is malformed
        """
        scheduled = scheduled_datetime(appointment)
        if scheduled is None:
            return None

        duration = appointment.get("duration_minutes")
        if duration is None:
            duration = get_settings().default_appointment_duration

        return cls(
            booking_date=scheduled.date(),
            start_minute=scheduled.hour * 60 + scheduled.minute,
            duration_minutes=duration,
        )

    model_config = {"frozen": True}


def scheduled_datetime(appointment: Mapping[str, Any]) -> Optional[datetime]:
    """
    Read the scheduled timestamp of an appointment record.

    Returns None when unscheduled, raises ValueError when unparseable.
    """
    scheduled = appointment.get("scheduled_date")
    if scheduled is None or scheduled == "":
        return None
    if isinstance(scheduled, datetime):
        return scheduled
    if isinstance(scheduled, str):
        return datetime.fromisoformat(scheduled.replace("Z", "+00:00"))
    raise ValueError(f"Invalid scheduled_date: {scheduled!r}")


def bookings_for_date(
    appointments: Iterable[Mapping[str, Any]],
    target_date: date,
    clinic_id: Optional[int] = None,
) -> List[ExistingBooking]:
    """
    Select the appointments that occupy the calendar on a given day.

    Cancelled appointments and appointments of other clinics are skipped.
    Malformed records are logged and skipped so one bad row cannot fail
    the whole day.

    Args:
        appointments: Raw appointment records from the booking repository
        target_date: Clinic-local day of interest
        clinic_id: Optional clinic filter

    Returns:
        Bookings on target_date, in repository order
    """
    bookings = []
    for appointment in appointments:
        if appointment.get("status") in CANCELLED_APPOINTMENT_STATUSES:
            continue
        if clinic_id is not None and appointment.get("clinic_id") not in (None, clinic_id):
            continue
        try:
            scheduled = scheduled_datetime(appointment)
            if scheduled is None or scheduled.date() != target_date:
                continue
            booking = ExistingBooking.from_appointment(appointment)
        except ValueError as e:
            logger.warning(f"Skipping malformed appointment {appointment.get('id')}: {e}")
            continue
        bookings.append(booking)
    return bookings
