"""
Candidate slot models produced by the availability engine.
"""

from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, model_validator

from clinic_scheduling.models.calendar import ClinicCalendarConfig, format_clock

AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 18


class UnavailabilityReason(str, Enum):
    """Why a candidate slot cannot be booked."""

    NON_WORKING_DAY = "non_working_day"
    OUTSIDE_HOURS = "outside_hours"
    LUNCH_BREAK_CONFLICT = "lunch_break_conflict"
    BOOKING_CONFLICT = "booking_conflict"


class DaySegment(str, Enum):
    """Display bucket of a slot, keyed by its start hour."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @classmethod
    def for_minute(cls, start_minute: int) -> "DaySegment":
        hour = start_minute // 60
        if hour < AFTERNOON_START_HOUR:
            return cls.MORNING
        if hour < EVENING_START_HOUR:
            return cls.AFTERNOON
        return cls.EVENING


class CandidateSlot(BaseModel):
    """
    One fixed-duration window considered for booking.
    """

    start_minute: int = Field(description="Start, minutes since midnight")
    end_minute: int = Field(description="End, minutes since midnight")
    available: bool = Field(description="Whether the window can be booked")
    reason: Optional[UnavailabilityReason] = Field(
        default=None, description="Why the window is unavailable"
    )
    segment: DaySegment = Field(description="Morning, afternoon or evening bucket")

    @model_validator(mode="after")
    def check_reason(self) -> "CandidateSlot":
        if self.available and self.reason is not None:
            raise ValueError("An available slot cannot carry a reason")
        if not self.available and self.reason is None:
            raise ValueError("An unavailable slot must carry a reason")
        return self

    @property
    def start_time(self) -> str:
        return format_clock(self.start_minute)

    @property
    def end_time(self) -> str:
        return format_clock(self.end_minute)

    @property
    def label(self) -> str:
        """Get the "HH:MM - HH:MM" display label."""
        return f"{self.start_time} - {self.end_time}"

    model_config = {"frozen": True}


class SegmentedSlots(BaseModel):
    """
    Slots of one day split into morning, afternoon and evening.

    Each list keeps ascending start order. A segment whose candidates are
    all unavailable still lists them.
    """

    morning: List[CandidateSlot] = Field(default_factory=list)
    afternoon: List[CandidateSlot] = Field(default_factory=list)
    evening: List[CandidateSlot] = Field(default_factory=list)

    def segment(self, segment: DaySegment) -> List[CandidateSlot]:
        """Get the slots of one segment."""
        return getattr(self, segment.value)

    def all_slots(self) -> List[CandidateSlot]:
        """Concatenate the segments back into day order."""
        return self.morning + self.afternoon + self.evening


class DayAvailability(BaseModel):
    """
    Availability of one clinic day for a requested duration.
    """

    target_date: date = Field(description="Clinic-local day the slots belong to")
    duration_minutes: int = Field(gt=0, description="Requested appointment length")
    is_working_day: bool = Field(description="Whether the clinic nominally operates that day")
    slots: List[CandidateSlot] = Field(default_factory=list)
    calendar: Optional[ClinicCalendarConfig] = Field(
        default=None, description="Clinic calendar the slots were computed from"
    )

    @property
    def segments(self) -> SegmentedSlots:
        return group_by_segment(self.slots)

    @property
    def available_slots(self) -> List[CandidateSlot]:
        return [slot for slot in self.slots if slot.available]

    @property
    def has_availability(self) -> bool:
        """True if any computed slot can be booked."""
        return has_availability(self.slots)


def group_by_segment(slots: Iterable[CandidateSlot]) -> SegmentedSlots:
    """
    Split ordered slots into their day segments.

    Every slot lands in exactly one segment and relative order is kept.
    """
    grouped = SegmentedSlots()
    for slot in slots:
        grouped.segment(slot.segment).append(slot)
    return grouped


def has_availability(slots: Iterable[CandidateSlot]) -> bool:
    """Fold over computed slots: True if at least one is bookable."""
    return any(slot.available for slot in slots)
