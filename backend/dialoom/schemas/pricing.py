"""Host rate card schemas."""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from ..core.constants import DEFAULT_CURRENCY, MAX_SESSION_DURATION, MIN_SESSION_DURATION
from ._strict_base import StrictModel, StrictRequestModel


class HostPricingEntry(StrictRequestModel):
    duration: int = Field(..., ge=MIN_SESSION_DURATION, le=MAX_SESSION_DURATION)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: str = Field(DEFAULT_CURRENCY, min_length=3, max_length=3)
    is_custom: bool = False
    includes_screen_sharing: bool = False
    includes_translation: bool = False
    includes_recording: bool = False
    includes_transcription: bool = False

    @field_validator("currency")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


class HostPricingUpdate(StrictRequestModel):
    """Full replacement of the caller's rate card."""

    entries: List[HostPricingEntry] = Field(..., max_length=20)


class HostPricingResponse(StrictModel):
    id: str
    host_id: str
    duration: int
    price: Decimal
    currency: str
    is_active: bool
    is_custom: bool
    includes_screen_sharing: bool
    includes_translation: bool
    includes_recording: bool
    includes_transcription: bool


class AddOnOffer(StrictModel):
    offered: bool
    price: Decimal


class HostServicesResponse(StrictModel):
    host_id: str
    services: Dict[str, AddOnOffer]


class PlatformPricingConfig(StrictModel):
    """Commission, VAT and add-on prices currently in effect."""

    commission_rate: Decimal
    vat_rate: Decimal
    screen_sharing_price: Decimal
    translation_price: Decimal
    recording_price: Decimal
    transcription_price: Decimal


class PlatformPricingConfigUpdate(StrictRequestModel):
    """Partial update; omitted fields keep their current value."""

    commission_rate: Optional[Decimal] = Field(None, ge=0, le=1, decimal_places=4)
    vat_rate: Optional[Decimal] = Field(None, ge=0, le=1, decimal_places=4)
    screen_sharing_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    translation_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    recording_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    transcription_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
