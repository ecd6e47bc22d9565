"""
Availability API Server.

A FastAPI-based microservice exposing clinic day availability.
Inputs are fetched asynchronously; slot computation is pure and needs no
locking between concurrent requests.
"""

from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from clinic_scheduling.config import configure_logging, get_settings
from clinic_scheduling.exceptions import (
    ClinicNotFoundError,
    InvalidAvailabilityRequest,
    InvalidCalendarConfig,
)
from clinic_scheduling.models.booking import ExistingBooking
from clinic_scheduling.models.calendar import (
    ClinicCalendarConfig,
    Weekday,
    format_clock,
    parse_clock,
)
from clinic_scheduling.models.slot import (
    CandidateSlot,
    DayAvailability,
    DaySegment,
    SegmentedSlots,
    UnavailabilityReason,
)
from clinic_scheduling.services.availability import (
    AvailabilityService,
    get_availability_service,
)
from clinic_scheduling.services.clinic_data import get_clinic_data_service
from clinic_scheduling.services.engine import LateSlotPolicy, build_day_availability
from clinic_scheduling.services.formatting import (
    available_only as keep_available,
    format_clock_range,
    format_date_header,
    no_availability_message,
    non_working_day_notice,
    ordered_working_days,
    reason_label,
    working_day_names,
)

# ============================================================================
# Data Models
# ============================================================================


class SlotResponse(BaseModel):
    """Response model for one candidate slot."""

    segment: DaySegment
    start_minute: int
    end_minute: int
    start_time: str
    end_time: str
    label: str
    available: bool
    reason: Optional[UnavailabilityReason] = None
    reason_label: Optional[str] = None

    @classmethod
    def from_slot(cls, slot: CandidateSlot) -> "SlotResponse":
        return cls(
            segment=slot.segment,
            start_minute=slot.start_minute,
            end_minute=slot.end_minute,
            start_time=slot.start_time,
            end_time=slot.end_time,
            label=slot.label,
            available=slot.available,
            reason=slot.reason,
            reason_label=reason_label(slot.reason),
        )


class SegmentsResponse(BaseModel):
    """Slots grouped by day segment."""

    morning: List[SlotResponse]
    afternoon: List[SlotResponse]
    evening: List[SlotResponse]

    @classmethod
    def from_segments(cls, segments: SegmentedSlots) -> "SegmentsResponse":
        return cls(
            morning=[SlotResponse.from_slot(s) for s in segments.morning],
            afternoon=[SlotResponse.from_slot(s) for s in segments.afternoon],
            evening=[SlotResponse.from_slot(s) for s in segments.evening],
        )


class ClinicInfoResponse(BaseModel):
    """Summary of the clinic calendar the slots were computed from."""

    work_start: str
    work_end: str
    working_hours: str
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None
    lunch_break: Optional[str] = None
    working_days: List[Weekday]
    working_day_names: List[str]

    @classmethod
    def from_config(cls, config: ClinicCalendarConfig) -> "ClinicInfoResponse":
        lunch = {}
        if config.has_lunch_break:
            lunch = {
                "lunch_start": format_clock(config.lunch_start),
                "lunch_end": format_clock(config.lunch_end),
                "lunch_break": format_clock_range(config.lunch_start, config.lunch_end),
            }
        return cls(
            work_start=format_clock(config.work_start),
            work_end=format_clock(config.work_end),
            working_hours=format_clock_range(config.work_start, config.work_end),
            working_days=ordered_working_days(config),
            working_day_names=working_day_names(config),
            **lunch,
        )


class DayAvailabilityResponse(BaseModel):
    """Response model for a day availability query."""

    clinic_id: Optional[int] = None
    target_date: date
    formatted_date: str
    duration_minutes: int
    is_working_day: bool
    has_availability: bool
    notice: Optional[str] = None
    message: Optional[str] = None
    clinic_info: Optional[ClinicInfoResponse] = None
    segments: SegmentsResponse


class BookingPayload(BaseModel):
    """An existing booking passed inline to the compute endpoint."""

    start_minute: int = Field(lt=24 * 60, description="Start as minutes or an \"HH:MM\" string")
    duration_minutes: int = Field(gt=0)

    @field_validator("start_minute", mode="before")
    @classmethod
    def parse_start(cls, v: Union[int, str]) -> int:
        return parse_clock(v)


class ComputeRequest(BaseModel):
    """Request to compute availability from inline inputs."""

    config: Dict[str, Any] = Field(
        default_factory=dict, description="Clinic calendar record; absent fields use defaults"
    )
    target_date: date
    duration_minutes: int = Field(gt=0)
    bookings: List[BookingPayload] = Field(default_factory=list)
    late_slot_policy: Optional[LateSlotPolicy] = None


def _build_response(
    availability: DayAvailability,
    clinic_id: Optional[int] = None,
    available_only: bool = False,
) -> DayAvailabilityResponse:
    segments = availability.segments
    if available_only:
        segments = keep_available(segments)

    has_availability = availability.has_availability
    return DayAvailabilityResponse(
        clinic_id=clinic_id,
        target_date=availability.target_date,
        formatted_date=format_date_header(availability.target_date),
        duration_minutes=availability.duration_minutes,
        is_working_day=availability.is_working_day,
        has_availability=has_availability,
        notice=None if availability.is_working_day else non_working_day_notice(),
        message=None if has_availability else no_availability_message(availability.duration_minutes),
        clinic_info=(
            ClinicInfoResponse.from_config(availability.calendar)
            if availability.calendar is not None
            else None
        ),
        segments=SegmentsResponse.from_segments(segments),
    )


# ============================================================================
# FastAPI Application
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging()
    logger.info("Starting Availability API Server")
    yield
    # Shutdown
    logger.info("Shutting down Availability API Server")
    await get_clinic_data_service().close()


app = FastAPI(
    title="Clinic Availability API",
    description="API computing bookable appointment slots for clinic days",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# API Endpoints
# ============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.get(
    "/api/v1/clinics/{clinic_id}/availability",
    response_model=DayAvailabilityResponse,
)
async def get_day_availability(
    clinic_id: int,
    target_date: date = Query(..., alias="date", description="Clinic-local day (YYYY-MM-DD)"),
    duration_minutes: int = Query(..., ge=1, le=24 * 60, description="Appointment length"),
    available_only: bool = Query(default=False, description="Hide unavailable slots"),
    service: AvailabilityService = Depends(get_availability_service),
):
    """
    Get the candidate slots of a clinic day.

    Every slot is returned with its segment and, when unavailable, the
    reason. Use available_only to get the bookable view.
    """
    try:
        availability = await service.get_day_availability(
            clinic_id, target_date, duration_minutes
        )
    except ClinicNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (InvalidAvailabilityRequest, InvalidCalendarConfig) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except httpx.HTTPError as e:
        logger.error(f"Clinic data unavailable for clinic {clinic_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Clinic data provider unavailable",
        )

    return _build_response(availability, clinic_id=clinic_id, available_only=available_only)


@app.post("/api/v1/availability/compute", response_model=DayAvailabilityResponse)
async def compute_availability(
    request: ComputeRequest,
    available_only: bool = Query(default=False, description="Hide unavailable slots"),
):
    """
    Compute a day's slots from an inline calendar and booking list.

    No clinic data is fetched; this is the engine exposed as-is.
    """
    settings = get_settings()
    try:
        config = ClinicCalendarConfig.from_clinic_record(request.config, settings)
        bookings = [
            ExistingBooking(
                booking_date=request.target_date,
                start_minute=b.start_minute,
                duration_minutes=b.duration_minutes,
            )
            for b in request.bookings
        ]
        availability = build_day_availability(
            config,
            request.target_date,
            request.duration_minutes,
            bookings,
            step_minutes=settings.slot_step_minutes,
            late_slot_policy=request.late_slot_policy or settings.late_slot_policy,
        )
    except (InvalidAvailabilityRequest, InvalidCalendarConfig) as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _build_response(availability, available_only=available_only)


# ============================================================================
# Run Server
# ============================================================================


def run_server(host: Optional[str] = None, port: Optional[int] = None):
    """Run the availability API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "clinic_scheduling.api.availability_server:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=False,
        workers=4,  # Multiple workers for concurrency
        loop="uvloop",  # High-performance event loop
        http="httptools",  # Fast HTTP parser
    )


if __name__ == "__main__":
    run_server()
