"""
Clinic Data Service - Client for the clinic management API.

Fetches clinic calendar settings and appointments, the two inputs of the
availability engine. Uses a pooled async HTTP client for high concurrency.
"""

from datetime import date
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from clinic_scheduling.config import get_settings
from clinic_scheduling.exceptions import ClinicNotFoundError
from clinic_scheduling.models.booking import ExistingBooking, bookings_for_date
from clinic_scheduling.models.calendar import ClinicCalendarConfig


class ClinicDataService:
    """
    Async client for clinic settings and appointments.

    Implements connection pooling for efficient concurrent requests.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.settings.clinic_api_url,
                timeout=httpx.Timeout(self.settings.clinic_api_timeout),
                limits=httpx.Limits(
                    max_connections=self.settings.connection_pool_size,
                    max_keepalive_connections=self.settings.connection_pool_size // 2,
                ),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_clinic_config(self, clinic_id: int) -> ClinicCalendarConfig:
        """
        Fetch the calendar settings of a clinic.

        Args:
            clinic_id: The clinic identifier

        Returns:
            The clinic calendar, with defaults for absent fields

        Raises:
            ClinicNotFoundError: If the clinic does not exist
            InvalidCalendarConfig: If the stored settings are malformed
        """
        client = await self._get_client()

        try:
            response = await client.get(f"/api/clinic/{clinic_id}/config")
            if response.status_code == 404:
                raise ClinicNotFoundError(clinic_id)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching clinic {clinic_id} config: {e}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error fetching clinic {clinic_id} config: {e}")
            raise

        config = ClinicCalendarConfig.from_clinic_record(response.json(), self.settings)
        logger.debug(f"Loaded calendar for clinic {clinic_id}: {config}")
        return config

    async def get_appointments(self, clinic_id: int) -> List[Dict[str, Any]]:
        """
        Fetch every appointment record of a clinic.

        Args:
            clinic_id: The clinic identifier

        Returns:
            Raw appointment records
        """
        client = await self._get_client()

        try:
            response = await client.get("/api/appointments", params={"clinic_id": clinic_id})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching appointments: {e}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error fetching appointments: {e}")
            raise

        appointments = response.json()
        logger.info(f"Found {len(appointments)} appointments for clinic {clinic_id}")
        return appointments

    async def get_day_bookings(
        self, clinic_id: int, target_date: date
    ) -> List[ExistingBooking]:
        """Fetch the bookings that occupy a clinic's calendar on one day."""
        appointments = await self.get_appointments(clinic_id)
        bookings = bookings_for_date(appointments, target_date, clinic_id)
        logger.debug(
            f"{len(bookings)} bookings on {target_date.isoformat()} for clinic {clinic_id}"
        )
        return bookings


# Singleton instance for reuse
_clinic_data_service: Optional[ClinicDataService] = None


def get_clinic_data_service() -> ClinicDataService:
    """Get the singleton clinic data service instance."""
    global _clinic_data_service
    if _clinic_data_service is None:
        _clinic_data_service = ClinicDataService()
    return _clinic_data_service
