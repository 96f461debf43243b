"""Host verification schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..core.enums import HostVerificationStatus
from ._strict_base import StrictModel, StrictRequestModel


class HostRejectRequest(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=1000)


class HostVerificationResponse(StrictModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    host_verification_status: HostVerificationStatus
    verified_at: Optional[datetime] = None
    verification_rejection_reason: Optional[str] = None
