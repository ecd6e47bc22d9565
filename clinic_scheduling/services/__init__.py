"""
Services layer for the clinic scheduling service.
"""

from .availability import AvailabilityService
from .clinic_data import ClinicDataService
from .engine import (
    LateSlotPolicy,
    build_day_availability,
    compute_day_availability,
    group_by_segment,
    has_availability,
)

__all__ = [
    "AvailabilityService",
    "ClinicDataService",
    "LateSlotPolicy",
    "build_day_availability",
    "compute_day_availability",
    "group_by_segment",
    "has_availability",
]
