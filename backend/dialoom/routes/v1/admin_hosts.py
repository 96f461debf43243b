# backend/dialoom/routes/v1/admin_hosts.py
"""
Admin review of host applications, mounted under /api/admin/hosts.

    GET /pending - Applications awaiting review
    POST /{user_id}/verification/approve - Verify a host
    POST /{user_id}/verification/reject - Reject an application
"""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from ...api.dependencies import get_current_admin_user, get_host_verification_service
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.host import HostRejectRequest, HostVerificationResponse
from ...services.host_verification_service import HostVerificationService
from .bookings import handle_domain_exception

router = APIRouter(tags=["admin-hosts"])


@router.get("/pending", response_model=List[HostVerificationResponse])
async def list_pending_hosts(
    current_user: User = Depends(get_current_admin_user),
    verification_service: HostVerificationService = Depends(get_host_verification_service),
) -> List[HostVerificationResponse]:
    try:
        users = await asyncio.to_thread(verification_service.list_pending, current_user)
        return [HostVerificationResponse.model_validate(user) for user in users]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{user_id}/verification/approve", response_model=HostVerificationResponse)
async def approve_host(
    user_id: str,
    current_user: User = Depends(get_current_admin_user),
    verification_service: HostVerificationService = Depends(get_host_verification_service),
) -> HostVerificationResponse:
    try:
        user = await asyncio.to_thread(verification_service.approve, user_id, current_user)
        return HostVerificationResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{user_id}/verification/reject", response_model=HostVerificationResponse)
async def reject_host(
    user_id: str,
    reject_data: Optional[HostRejectRequest] = Body(None),
    current_user: User = Depends(get_current_admin_user),
    verification_service: HostVerificationService = Depends(get_host_verification_service),
) -> HostVerificationResponse:
    try:
        user = await asyncio.to_thread(
            verification_service.reject,
            user_id,
            current_user,
            reject_data.reason if reject_data else None,
        )
        return HostVerificationResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)
