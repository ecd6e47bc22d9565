"""
Availability Service - Computes bookable slots for a clinic day.

Fetches the clinic calendar and that day's bookings through the clinic
data service, then hands them to the pure availability engine.
"""

import asyncio
from datetime import date
from typing import Optional

from loguru import logger

from clinic_scheduling.config import get_settings
from clinic_scheduling.models.slot import DayAvailability
from clinic_scheduling.services.clinic_data import ClinicDataService, get_clinic_data_service
from clinic_scheduling.services.engine import LateSlotPolicy, build_day_availability


class AvailabilityService:
    """
    Computes day availability for a clinic.

    All waiting happens while fetching inputs; the computation itself is
    synchronous and holds no shared state.
    """

    def __init__(self, clinic_data: Optional[ClinicDataService] = None):
        self.settings = get_settings()
        self._clinic_data = clinic_data or get_clinic_data_service()

    @property
    def late_slot_policy(self) -> LateSlotPolicy:
        return LateSlotPolicy(self.settings.late_slot_policy)

    async def get_day_availability(
        self,
        clinic_id: int,
        target_date: date,
        duration_minutes: int,
    ) -> DayAvailability:
        """
        Compute the slots of one clinic day.

        Args:
            clinic_id: The clinic identifier
            target_date: Clinic-local day to inspect
            duration_minutes: Requested appointment length

        Returns:
            The day's slots with segment and availability facts

        Raises:
            InvalidAvailabilityRequest: On a non-positive duration
            ClinicNotFoundError: If the clinic does not exist
        """
        config, bookings = await asyncio.gather(
            self._clinic_data.get_clinic_config(clinic_id),
            self._clinic_data.get_day_bookings(clinic_id, target_date),
        )

        availability = build_day_availability(
            config,
            target_date,
            duration_minutes,
            bookings,
            step_minutes=self.settings.slot_step_minutes,
            late_slot_policy=self.late_slot_policy,
        )

        logger.info(
            f"Clinic {clinic_id} on {target_date.isoformat()}: "
            f"{len(availability.available_slots)}/{len(availability.slots)} slots "
            f"free for {duration_minutes} min"
        )
        return availability


# Singleton instance for reuse
_availability_service: Optional[AvailabilityService] = None


def get_availability_service() -> AvailabilityService:
    """Get the singleton availability service instance."""
    global _availability_service
    if _availability_service is None:
        _availability_service = AvailabilityService()
    return _availability_service
