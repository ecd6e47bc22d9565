"""
Errors raised by the availability layer.
"""


class AvailabilityError(Exception):
    """Base class for availability failures."""


class InvalidAvailabilityRequest(AvailabilityError, ValueError):
    """The requested duration or enumeration step cannot produce slots."""


class InvalidCalendarConfig(AvailabilityError, ValueError):
    """The clinic calendar record is malformed or self-contradictory."""


class ClinicNotFoundError(AvailabilityError):
    """The clinic provider has no record for the requested clinic."""

    def __init__(self, clinic_id: int):
        super().__init__(f"Clinic {clinic_id} not found")
        self.clinic_id = clinic_id
