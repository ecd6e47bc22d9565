"""
Presentation helpers.

Maps reason codes and segments to the Portuguese text shown to clinic
staff. Nothing in the engine depends on this module.
"""

from datetime import date
from typing import List, Optional

from clinic_scheduling.config import (
    PORTUGUESE_DAY_NAMES,
    PORTUGUESE_MONTH_NAMES,
    PORTUGUESE_SHORT_DAY_NAMES,
    REASON_LABELS,
    SEGMENT_TITLES,
)
from clinic_scheduling.models.calendar import ClinicCalendarConfig, Weekday, format_clock
from clinic_scheduling.models.slot import (
    DaySegment,
    SegmentedSlots,
    UnavailabilityReason,
)


def reason_label(reason: Optional[UnavailabilityReason]) -> Optional[str]:
    """Get the display text of an unavailability reason."""
    if reason is None:
        return None
    return REASON_LABELS[UnavailabilityReason(reason).value]


def segment_title(segment: DaySegment) -> str:
    """Get the section title of a day segment."""
    return SEGMENT_TITLES[DaySegment(segment).value]


def format_date_header(day: date) -> str:
    """Format a day as e.g. "Segunda-feira, 19 de outubro 2026"."""
    day_name = PORTUGUESE_DAY_NAMES[day.weekday()]
    month_name = PORTUGUESE_MONTH_NAMES[day.month]
    return f"{day_name}, {day.day:02d} de {month_name} {day.year}"


def no_availability_message(duration_minutes: int) -> str:
    """Get the message shown when a day has no bookable slot."""
    return (
        f"Não há horários disponíveis para consultas de {duration_minutes} "
        f"minutos neste dia. Tente selecionar outro dia ou ajustar a duração "
        f"da consulta."
    )


def non_working_day_notice() -> str:
    """Get the warning shown for days the clinic does not operate."""
    return "Dia não útil - Agendamento possível mas não recomendado"


def format_clock_range(start_minute: int, end_minute: int) -> str:
    """Format a window as e.g. "08:00 às 18:00"."""
    return f"{format_clock(start_minute)} às {format_clock(end_minute)}"


def ordered_working_days(config: ClinicCalendarConfig) -> List[Weekday]:
    """Working days of a clinic, Monday first."""
    return [day for day in Weekday if day in config.working_days]


def working_day_names(config: ClinicCalendarConfig) -> List[str]:
    """Short Portuguese names of the working days, Monday first."""
    return [
        PORTUGUESE_SHORT_DAY_NAMES[index]
        for index, day in enumerate(Weekday)
        if day in config.working_days
    ]


def available_only(segmented: SegmentedSlots) -> SegmentedSlots:
    """Keep only bookable slots in each segment."""
    return SegmentedSlots(
        morning=[slot for slot in segmented.morning if slot.available],
        afternoon=[slot for slot in segmented.afternoon if slot.available],
        evening=[slot for slot in segmented.evening if slot.available],
    )
