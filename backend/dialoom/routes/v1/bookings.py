# backend/dialoom/routes/v1/bookings.py
"""
Booking routes, mounted under /api/bookings.

All business logic delegated to BookingService.

Endpoints:
    POST / - Request a booking (created as pending)
    GET /user - Bookings of the current user, optionally by role
    POST /check-availability - Check whether a slot is free
    POST /quote - Expected price and split for a session
    GET /{booking_id} - Booking details (host or guest only)
    PUT /{booking_id}/cancel - Cancel a booking
    POST /{booking_id}/confirm-payment - Confirm after payment capture
    POST /{booking_id}/complete - Mark booking as completed (host only)
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies import (
    get_booking_service,
    get_current_active_user,
    get_pricing_service,
)
from ...core.enums import BookingRole, BookingStatus
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.booking import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    BookingCancel,
    BookingConfirmPayment,
    BookingCreate,
    BookingQuoteRequest,
    BookingQuoteResponse,
    BookingResponse,
)
from ...services.booking_service import BookingService
from ...services.pricing_service import PricingService

logger = logging.getLogger(__name__)

# No prefix here, added when mounting in main.py
router = APIRouter(tags=["bookings"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid price or request"},
        401: {"description": "Not authenticated"},
        403: {"description": "Host is not verified"},
        404: {"description": "Host not found"},
        409: {"description": "Time slot not available"},
    },
)
async def create_booking(
    booking_data: BookingCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Request a session with a host.

    The booking is created as ``pending`` and confirmed once payment succeeds.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking,
            guest_id=current_user.id,
            host_id=booking_data.host_id,
            scheduled_date=booking_data.scheduled_date,
            start_time=booking_data.start_time,
            duration=booking_data.duration,
            price=booking_data.price,
            services=booking_data.selected_services,
            notes=booking_data.notes,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/user", response_model=List[BookingResponse])
async def get_user_bookings(
    role: Optional[BookingRole] = Query(None, description="host or guest; both when omitted"),
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    try:
        bookings = await asyncio.to_thread(
            booking_service.list_bookings_for_user,
            current_user.id,
            role=role,
            status=status_filter,
        )
        return [BookingResponse.model_validate(booking) for booking in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/check-availability", response_model=AvailabilityCheckResponse)
async def check_availability(
    check_data: AvailabilityCheckRequest = Body(...),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> AvailabilityCheckResponse:
    try:
        result = await asyncio.to_thread(
            booking_service.check_availability,
            check_data.host_id,
            check_data.scheduled_date,
            check_data.start_time,
            check_data.duration,
        )
        return AvailabilityCheckResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/quote", response_model=BookingQuoteResponse)
async def quote_booking(
    quote_data: BookingQuoteRequest = Body(...),
    current_user: User = Depends(get_current_active_user),
    pricing_service: PricingService = Depends(get_pricing_service),
) -> BookingQuoteResponse:
    """Price a session the way booking creation will check it."""
    try:
        quote, breakdown = await asyncio.to_thread(
            pricing_service.quote_with_breakdown,
            quote_data.host_id,
            quote_data.duration,
            quote_data.selected_services,
        )
        return BookingQuoteResponse(
            host_id=quote.host_id,
            duration=quote.duration,
            currency=quote.currency,
            base_price=quote.base_price,
            addons=quote.addons,
            total=quote.total,
            commission=breakdown.commission,
            vat=breakdown.vat,
            host_amount=breakdown.host_amount,
        )
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Dynamic routes (with path parameters - placed last)
# ============================================================================


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    responses={403: {"description": "Not a participant"}, 404: {"description": "Not found"}},
)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.get_booking_for_user, booking_id, current_user.id
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.put(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    responses={
        403: {"description": "Not a participant"},
        404: {"description": "Booking not found"},
        422: {"description": "Booking can no longer be cancelled"},
    },
)
async def cancel_booking(
    booking_id: str,
    cancel_data: Optional[BookingCancel] = Body(None),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.cancel_booking,
            booking_id,
            current_user.id,
            cancel_data.reason if cancel_data else None,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{booking_id}/confirm-payment",
    response_model=BookingResponse,
    responses={
        403: {"description": "Only the guest can confirm"},
        404: {"description": "Booking not found"},
        422: {"description": "Booking not pending or payment not captured"},
    },
)
async def confirm_booking_payment(
    booking_id: str,
    payment_data: BookingConfirmPayment = Body(...),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.confirm_booking_payment,
            booking_id,
            current_user.id,
            payment_data.payment_intent_id,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{booking_id}/complete",
    response_model=BookingResponse,
    responses={
        403: {"description": "Only the host can complete"},
        404: {"description": "Booking not found"},
        422: {"description": "Booking is not confirmed"},
    },
)
async def complete_booking(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            booking_service.complete_booking, booking_id, current_user.id
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)
