# backend/dialoom/schemas/booking.py
"""
Booking schemas for the Dialoom booking API.

Requests accept the frontend's camelCase keys (``hostId``, ``scheduledDate``)
as well as snake_case. Times are "HH:MM" strings in both directions.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field, field_serializer, field_validator

from ..core.constants import MAX_SESSION_DURATION, MIN_SESSION_DURATION
from ..core.enums import AddOnService, BookingStatus
from ._strict_base import StrictModel, StrictRequestModel
from .base import ensure_date_only, format_hhmm, parse_hhmm


class BookingCreate(StrictRequestModel):
    """Request to reserve a host for a session. The guest is the caller."""

    host_id: str = Field(..., min_length=1, max_length=64, description="Host to book")
    scheduled_date: date = Field(..., description="Date of the session (YYYY-MM-DD)")
    start_time: time = Field(..., description="Start time (HH:MM)")
    duration: int = Field(
        ...,
        ge=MIN_SESSION_DURATION,
        le=MAX_SESSION_DURATION,
        description="Session length in minutes",
    )
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    selected_services: List[AddOnService] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=1000, description="Optional note for the host")

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return ensure_date_only(v, "scheduled_date")

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return parse_hhmm(v)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class BookingResponse(StrictModel):
    """Booking as returned to hosts and guests."""

    id: str
    host_id: str
    guest_id: str
    scheduled_date: date
    start_time: time
    end_time: time
    duration: int
    price: Decimal
    currency: str
    status: BookingStatus
    selected_services: List[str]
    notes: Optional[str] = None
    payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None

    @field_serializer("start_time", "end_time")
    def _serialize_time(self, value: time) -> str:
        return format_hhmm(value)


class BookingCancel(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=500)


class BookingConfirmPayment(StrictRequestModel):
    payment_intent_id: str = Field(..., min_length=3, max_length=255)


class AvailabilityCheckRequest(StrictRequestModel):
    """Ask whether a slot is free without booking it."""

    host_id: str = Field(..., min_length=1, max_length=64)
    scheduled_date: date
    start_time: time
    duration: int = Field(..., ge=MIN_SESSION_DURATION, le=MAX_SESSION_DURATION)

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return ensure_date_only(v, "scheduled_date")

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return parse_hhmm(v)


class ConflictWindow(StrictModel):
    scheduled_date: str
    start_time: str
    end_time: str


class AvailabilityCheckResponse(StrictModel):
    available: bool
    reason: Optional[str] = None
    conflicts: List[ConflictWindow] = Field(default_factory=list)


class BookingQuoteRequest(StrictRequestModel):
    host_id: str = Field(..., min_length=1, max_length=64)
    duration: int = Field(..., ge=MIN_SESSION_DURATION, le=MAX_SESSION_DURATION)
    selected_services: List[AddOnService] = Field(default_factory=list)


class BookingQuoteResponse(StrictModel):
    """Expected price of a session and how it is split."""

    host_id: str
    duration: int
    currency: str
    base_price: Decimal
    addons: Dict[str, Decimal]
    total: Decimal
    commission: Decimal
    vat: Decimal
    host_amount: Decimal
