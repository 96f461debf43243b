# backend/dialoom/routes/v1/hosts.py
"""
Host catalog routes.

Public reads (mounted under /api/hosts):
    GET /{host_id}/pricing - Active rate card of a host
    GET /{host_id}/services - Add-ons a host offers and their prices
    GET /{host_id}/availability - Published availability windows

Authenticated host self-service (mounted under /api/host):
    GET /pricing - Caller's rate card
    PUT /pricing - Replace caller's rate card
    POST /availability - Publish a window
    DELETE /availability/{availability_id} - Remove a window
    POST /verification/apply - Apply to become a host
"""

import asyncio
import logging
from typing import List

from fastapi import APIRouter, Body, Depends, Response, status

from ...api.dependencies import (
    get_availability_service,
    get_current_active_user,
    get_host_verification_service,
    get_pricing_service,
)
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.availability import AvailabilityCreate, AvailabilityResponse
from ...schemas.host import HostVerificationResponse
from ...schemas.pricing import (
    AddOnOffer,
    HostPricingResponse,
    HostPricingUpdate,
    HostServicesResponse,
)
from ...services.availability_service import AvailabilityService
from ...services.host_verification_service import HostVerificationService
from ...services.pricing_service import PricingService
from .bookings import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["hosts"])
host_router = APIRouter(tags=["host-self-service"])


@router.get("/{host_id}/pricing", response_model=List[HostPricingResponse])
async def get_host_pricing(
    host_id: str,
    pricing_service: PricingService = Depends(get_pricing_service),
) -> List[HostPricingResponse]:
    rates = await asyncio.to_thread(pricing_service.get_rate_card, host_id)
    return [HostPricingResponse.model_validate(rate) for rate in rates]


@router.get("/{host_id}/services", response_model=HostServicesResponse)
async def get_host_services(
    host_id: str,
    pricing_service: PricingService = Depends(get_pricing_service),
) -> HostServicesResponse:
    services = await asyncio.to_thread(pricing_service.get_host_services, host_id)
    return HostServicesResponse(
        host_id=host_id,
        services={name: AddOnOffer(**offer) for name, offer in services.items()},
    )


@router.get("/{host_id}/availability", response_model=List[AvailabilityResponse])
async def get_host_availability(
    host_id: str,
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> List[AvailabilityResponse]:
    windows = await asyncio.to_thread(availability_service.list_for_host, host_id)
    return [AvailabilityResponse.model_validate(window) for window in windows]


@host_router.get("/pricing", response_model=List[HostPricingResponse])
async def get_my_pricing(
    current_user: User = Depends(get_current_active_user),
    pricing_service: PricingService = Depends(get_pricing_service),
) -> List[HostPricingResponse]:
    rates = await asyncio.to_thread(pricing_service.get_rate_card, current_user.id)
    return [HostPricingResponse.model_validate(rate) for rate in rates]


@host_router.put(
    "/pricing",
    response_model=List[HostPricingResponse],
    responses={403: {"description": "Caller has no host account"}},
)
async def replace_my_pricing(
    pricing_data: HostPricingUpdate = Body(...),
    current_user: User = Depends(get_current_active_user),
    pricing_service: PricingService = Depends(get_pricing_service),
) -> List[HostPricingResponse]:
    """Replace the caller's whole rate card; rows not sent are removed."""
    try:
        rates = await asyncio.to_thread(
            pricing_service.replace_rate_card,
            current_user,
            [entry.model_dump() for entry in pricing_data.entries],
        )
        return [HostPricingResponse.model_validate(rate) for rate in rates]
    except DomainException as e:
        handle_domain_exception(e)


@host_router.post(
    "/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Window overlaps an existing one"}},
)
async def add_my_availability(
    availability_data: AvailabilityCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    try:
        window = await asyncio.to_thread(
            availability_service.add_availability,
            current_user,
            availability_data.start_time,
            availability_data.end_time,
            specific_date=availability_data.date,
            day_of_week=availability_data.day_of_week,
        )
        return AvailabilityResponse.model_validate(window)
    except DomainException as e:
        handle_domain_exception(e)


@host_router.delete("/availability/{availability_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_availability(
    availability_id: str,
    current_user: User = Depends(get_current_active_user),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> Response:
    try:
        await asyncio.to_thread(
            availability_service.delete_availability, current_user, availability_id
        )
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@host_router.post("/verification/apply", response_model=HostVerificationResponse)
async def apply_as_host(
    current_user: User = Depends(get_current_active_user),
    verification_service: HostVerificationService = Depends(get_host_verification_service),
) -> HostVerificationResponse:
    """Ask to become a host. Bookings are only accepted once an admin verifies."""
    try:
        user = await asyncio.to_thread(verification_service.apply_as_host, current_user)
        return HostVerificationResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)
