"""
Slot availability engine.

Pure computation over a clinic calendar and the bookings of one day:
no I/O, no clock access, no formatting. Identical inputs always give an
identical, identically ordered result.
"""

from datetime import date, datetime
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from clinic_scheduling.exceptions import InvalidAvailabilityRequest
from clinic_scheduling.models.booking import ExistingBooking
from clinic_scheduling.models.calendar import ClinicCalendarConfig
from clinic_scheduling.models.slot import (
    CandidateSlot,
    DayAvailability,
    DaySegment,
    UnavailabilityReason,
    group_by_segment,
    has_availability,
)

SLOT_STEP_MINUTES = 30

__all__ = [
    "LateSlotPolicy",
    "SLOT_STEP_MINUTES",
    "build_day_availability",
    "compute_day_availability",
    "enumerate_candidate_windows",
    "evaluate_window",
    "group_by_segment",
    "has_availability",
]


class LateSlotPolicy(str, Enum):
    """What to do with a window that would end after closing time."""

    DROP = "drop"
    MARK_OUTSIDE_HOURS = "outside_hours"


def _validate_request(
    target_date: date, duration_minutes: int, step_minutes: int
) -> None:
    if isinstance(target_date, datetime) or not isinstance(target_date, date):
        raise InvalidAvailabilityRequest(
            f"target_date must be a calendar date without time, got {target_date!r}"
        )
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidAvailabilityRequest(
            f"duration_minutes must be an integer, got {duration_minutes!r}"
        )
    if duration_minutes <= 0:
        raise InvalidAvailabilityRequest(
            f"duration_minutes must be positive, got {duration_minutes}"
        )
    if isinstance(step_minutes, bool) or not isinstance(step_minutes, int) or step_minutes <= 0:
        raise InvalidAvailabilityRequest(
            f"step_minutes must be a positive integer, got {step_minutes!r}"
        )


def enumerate_candidate_windows(
    config: ClinicCalendarConfig,
    duration_minutes: int,
    step_minutes: int = SLOT_STEP_MINUTES,
    late_slot_policy: LateSlotPolicy = LateSlotPolicy.DROP,
) -> Iterator[Tuple[int, int]]:
    """
    Yield (start, end) windows stepping from opening time.

    Starts run while start < work_end. Windows ending after work_end are
    skipped under the drop policy and yielded otherwise.
    """
    start = config.work_start
    while start < config.work_end:
        end = start + duration_minutes
        if end <= config.work_end or late_slot_policy == LateSlotPolicy.MARK_OUTSIDE_HOURS:
            yield start, end
        start += step_minutes


def evaluate_window(
    config: ClinicCalendarConfig,
    start: int,
    end: int,
    bookings: Sequence[ExistingBooking],
    working_day: bool = True,
) -> Optional[UnavailabilityReason]:
    """
    Decide why a window is unavailable, or None if it can be booked.

    Checks run in fixed precedence and stop at the first failure:
    working day, working hours, lunch break, existing bookings.
    """
    if not working_day:
        return UnavailabilityReason.NON_WORKING_DAY

    if start < config.work_start or end > config.work_end:
        return UnavailabilityReason.OUTSIDE_HOURS

    lunch = config.lunch_window
    if lunch is not None:
        lunch_start, lunch_end = lunch
        if start < lunch_end and end > lunch_start:
            return UnavailabilityReason.LUNCH_BREAK_CONFLICT

    for booking in bookings:
        if booking.overlaps(start, end):
            return UnavailabilityReason.BOOKING_CONFLICT

    return None


def compute_day_availability(
    config: ClinicCalendarConfig,
    target_date: date,
    duration_minutes: int,
    bookings: Iterable[ExistingBooking],
    step_minutes: int = SLOT_STEP_MINUTES,
    late_slot_policy: LateSlotPolicy = LateSlotPolicy.DROP,
) -> List[CandidateSlot]:
    """
    Enumerate and evaluate every candidate slot of a clinic day.

    Args:
        config: Validated clinic calendar
        target_date: Clinic-local day, no time component
        duration_minutes: Requested appointment length
        bookings: Confirmed bookings of the clinic; other days are ignored
        step_minutes: Spacing between candidate starts
        late_slot_policy: Drop windows ending after closing, or mark them
            unavailable with the outside-hours reason

    Returns:
        Slots in ascending start order, available or not, each tagged
        with its day segment

    Raises:
        InvalidAvailabilityRequest: On a non-positive duration or step,
            or a target_date carrying a time
    """
    _validate_request(target_date, duration_minutes, step_minutes)
    try:
        late_slot_policy = LateSlotPolicy(late_slot_policy)
    except ValueError as e:
        raise InvalidAvailabilityRequest(f"Unknown late slot policy: {late_slot_policy!r}") from e

    day_bookings = [b for b in bookings if b.booking_date == target_date]
    working_day = config.is_working_day(target_date)

    slots = []
    for start, end in enumerate_candidate_windows(
        config, duration_minutes, step_minutes, late_slot_policy
    ):
        reason = evaluate_window(config, start, end, day_bookings, working_day)
        slots.append(
            CandidateSlot(
                start_minute=start,
                end_minute=end,
                available=reason is None,
                reason=reason,
                segment=DaySegment.for_minute(start),
            )
        )
    return slots


def build_day_availability(
    config: ClinicCalendarConfig,
    target_date: date,
    duration_minutes: int,
    bookings: Iterable[ExistingBooking],
    step_minutes: int = SLOT_STEP_MINUTES,
    late_slot_policy: LateSlotPolicy = LateSlotPolicy.DROP,
) -> DayAvailability:
    """Compute a day's slots and wrap them with the day-level facts."""
    slots = compute_day_availability(
        config,
        target_date,
        duration_minutes,
        bookings,
        step_minutes=step_minutes,
        late_slot_policy=late_slot_policy,
    )
    return DayAvailability(
        target_date=target_date,
        duration_minutes=duration_minutes,
        is_working_day=config.is_working_day(target_date),
        slots=slots,
        calendar=config,
    )
