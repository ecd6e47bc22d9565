"""
Clinic calendar models.

Clock times are carried as integer minutes since midnight. The "HH:MM"
strings stored in clinic settings are parsed here, at the boundary, and
formatted back only for display.
"""

import re
from datetime import date, time
from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from clinic_scheduling.config import Settings, get_settings
from clinic_scheduling.exceptions import InvalidCalendarConfig

MINUTES_PER_DAY = 24 * 60

_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


class Weekday(str, Enum):
    """Day of the week, as stored in clinic settings."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        """Weekday of a calendar date."""
        return list(cls)[day.weekday()]


def parse_clock(value: Any) -> int:
    """
    Convert a clock value to minutes since midnight.

    Accepts "HH:MM" (or "HH:MM:00" as returned by Postgres time columns),
    datetime.time, or an int already expressed in minutes. "24:00" is
    accepted as the end of the day.

    Raises:
        ValueError: If the value is not a valid clock time
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid clock time: {value!r}")
    if isinstance(value, int):
        minutes = value
    elif isinstance(value, time):
        if value.second or value.microsecond:
            raise ValueError(f"Clock time must have minute resolution: {value!r}")
        minutes = value.hour * 60 + value.minute
    elif isinstance(value, str):
        match = _CLOCK_PATTERN.match(value)
        if not match:
            raise ValueError(f"Invalid clock time: {value!r}")
        hours, mins, secs = match.groups()
        if int(mins) > 59 or (secs is not None and int(secs) != 0):
            raise ValueError(f"Invalid clock time: {value!r}")
        minutes = int(hours) * 60 + int(mins)
    else:
        raise ValueError(f"Invalid clock time: {value!r}")

    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"Clock time out of range: {value!r}")
    return minutes


def format_clock(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class ClinicCalendarConfig(BaseModel):
    """
    Operating calendar of one clinic.

    Loaded once per availability query and immutable afterwards.
    """

    working_days: FrozenSet[Weekday] = Field(
        default=frozenset(
            {
                Weekday.MONDAY,
                Weekday.TUESDAY,
                Weekday.WEDNESDAY,
                Weekday.THURSDAY,
                Weekday.FRIDAY,
            }
        ),
        description="Days of the week the clinic operates",
    )
    work_start: int = Field(default=8 * 60, description="Opening time, minutes since midnight")
    work_end: int = Field(default=18 * 60, description="Closing time, minutes since midnight")
    has_lunch_break: bool = Field(default=True, description="Whether lunch blocks bookings")
    lunch_start: int = Field(default=12 * 60, description="Lunch start, minutes since midnight")
    lunch_end: int = Field(default=13 * 60, description="Lunch end, minutes since midnight")

    @field_validator("work_start", "work_end", "lunch_start", "lunch_end", mode="before")
    @classmethod
    def parse_clock_field(cls, v: Any) -> int:
        """Accept "HH:MM" strings as well as minute offsets."""
        return parse_clock(v)

    @field_validator("working_days", mode="before")
    @classmethod
    def normalize_working_days(cls, v: Any) -> FrozenSet[Weekday]:
        """Accept day names in any case."""
        if isinstance(v, str) or not isinstance(v, (list, tuple, set, frozenset)):
            raise ValueError("working_days must be a collection of day names")
        days = set()
        for day in v:
            if isinstance(day, Weekday):
                days.add(day)
            else:
                days.add(Weekday(str(day).strip().lower()))
        return frozenset(days)

    @model_validator(mode="after")
    def check_windows(self) -> "ClinicCalendarConfig":
        if self.work_start >= self.work_end:
            raise ValueError(
                f"work_start ({format_clock(self.work_start)}) must be before "
                f"work_end ({format_clock(self.work_end)})"
            )
        if self.has_lunch_break and self.lunch_start > self.lunch_end:
            raise ValueError(
                f"lunch_start ({format_clock(self.lunch_start)}) must not be after "
                f"lunch_end ({format_clock(self.lunch_end)})"
            )
        return self

    @property
    def lunch_window(self) -> Optional[Tuple[int, int]]:
        """
        Lunch break clamped to the working window.

        None when lunch is disabled or has zero width after clamping.
        """
        if not self.has_lunch_break:
            return None
        start = max(self.lunch_start, self.work_start)
        end = min(self.lunch_end, self.work_end)
        if start >= end:
            return None
        return start, end

    def is_working_day(self, day: date) -> bool:
        """Check if the clinic operates on the given date."""
        return Weekday.of(day) in self.working_days

    @classmethod
    def from_clinic_record(
        cls, record: Mapping[str, Any], settings: Optional[Settings] = None
    ) -> "ClinicCalendarConfig":
        """
        Build a calendar from a stored clinic record.

        Absent or empty fields fall back to the configured defaults. The
        lunch break stays enabled unless the record explicitly disables it.

        Raises:
            InvalidCalendarConfig: If the record holds malformed values
        """
        settings = settings or get_settings()

        def pick(key: str, default: Any) -> Any:
            value = record.get(key)
            if value is None or value == "":
                return default
            return value

        has_lunch_break = record.get("has_lunch_break")
        if has_lunch_break is None:
            has_lunch_break = settings.default_has_lunch_break
        else:
            has_lunch_break = has_lunch_break is not False

        try:
            return cls(
                working_days=pick("working_days", settings.default_working_days),
                work_start=pick("work_start", settings.default_work_start),
                work_end=pick("work_end", settings.default_work_end),
                has_lunch_break=has_lunch_break,
                lunch_start=pick("lunch_start", settings.default_lunch_start),
                lunch_end=pick("lunch_end", settings.default_lunch_end),
            )
        except ValidationError as e:
            raise InvalidCalendarConfig(f"Invalid clinic calendar: {e}") from e

    model_config = {"frozen": True}
