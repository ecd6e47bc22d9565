"""
Configuration management for the clinic scheduling service.

This module provides centralized configuration using Pydantic settings
for type-safe environment variable management.
"""

import sys
from functools import lru_cache
from typing import List, Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Clinic API Configuration (settings and appointments provider)
    clinic_api_url: str = Field(
        default="http://localhost:5000", alias="CLINIC_API_URL"
    )
    clinic_api_timeout: int = Field(default=10, alias="CLINIC_API_TIMEOUT")
    connection_pool_size: int = Field(default=50, alias="CONNECTION_POOL_SIZE")

    # Slot Enumeration
    slot_step_minutes: int = Field(default=30, alias="SLOT_STEP_MINUTES", gt=0)
    late_slot_policy: Literal["drop", "outside_hours"] = Field(
        default="drop", alias="LATE_SLOT_POLICY"
    )

    # Clinic calendar defaults, applied when the clinic record omits a field
    default_working_days: List[str] = Field(
        default=["monday", "tuesday", "wednesday", "thursday", "friday"],
        alias="DEFAULT_WORKING_DAYS",
    )
    default_work_start: str = Field(default="08:00", alias="DEFAULT_WORK_START")
    default_work_end: str = Field(default="18:00", alias="DEFAULT_WORK_END")
    default_has_lunch_break: bool = Field(default=True, alias="DEFAULT_HAS_LUNCH_BREAK")
    default_lunch_start: str = Field(default="12:00", alias="DEFAULT_LUNCH_START")
    default_lunch_end: str = Field(default="13:00", alias="DEFAULT_LUNCH_END")
    default_appointment_duration: int = Field(
        default=60, alias="DEFAULT_APPOINTMENT_DURATION", gt=0
    )

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8080, alias="API_PORT")

    # Application Configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once,
    improving performance for repeated access.
    """
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=(level or get_settings().log_level).upper())


# Appointment statuses that no longer occupy the calendar
CANCELLED_APPOINTMENT_STATUSES = frozenset({"cancelada_paciente", "cancelada_dentista"})


# Portuguese display constants (centralized to avoid duplication)
PORTUGUESE_DAY_NAMES = {
    0: "Segunda-feira",
    1: "Terça-feira",
    2: "Quarta-feira",
    3: "Quinta-feira",
    4: "Sexta-feira",
    5: "Sábado",
    6: "Domingo",
}

# Short forms used in the clinic working-days summary
PORTUGUESE_SHORT_DAY_NAMES = {
    0: "Segunda",
    1: "Terça",
    2: "Quarta",
    3: "Quinta",
    4: "Sexta",
    5: "Sábado",
    6: "Domingo",
}

PORTUGUESE_MONTH_NAMES = {
    1: "janeiro",
    2: "fevereiro",
    3: "março",
    4: "abril",
    5: "maio",
    6: "junho",
    7: "julho",
    8: "agosto",
    9: "setembro",
    10: "outubro",
    11: "novembro",
    12: "dezembro",
}

# Keyed by UnavailabilityReason value
REASON_LABELS = {
    "non_working_day": "Dia não útil",
    "outside_hours": "Fora do horário de funcionamento",
    "lunch_break_conflict": "Conflito com horário de almoço",
    "booking_conflict": "Horário ocupado",
}

# Keyed by DaySegment value
SEGMENT_TITLES = {
    "morning": "Manhã",
    "afternoon": "Tarde",
    "evening": "Noite",
}
