"""
Data models for the clinic scheduling service.
"""

from .booking import ExistingBooking, bookings_for_date
from .calendar import ClinicCalendarConfig, Weekday, format_clock, parse_clock
from .slot import (
    CandidateSlot,
    DayAvailability,
    DaySegment,
    SegmentedSlots,
    UnavailabilityReason,
)

__all__ = [
    "CandidateSlot",
    "ClinicCalendarConfig",
    "DayAvailability",
    "DaySegment",
    "ExistingBooking",
    "SegmentedSlots",
    "UnavailabilityReason",
    "Weekday",
    "bookings_for_date",
    "format_clock",
    "parse_clock",
]
