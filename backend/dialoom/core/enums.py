# backend/dialoom/core/enums.py
"""Enumerations shared by models, schemas and services."""

from enum import Enum


class HostVerificationStatus(str, Enum):
    """Where a user stands in the host verification process."""

    UNREGISTERED = "unregistered"
    REGISTERED = "registered"  # Applied, awaiting admin review
    VERIFIED = "verified"  # Bookable
    REJECTED = "rejected"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Created, awaiting payment capture
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses that still occupy the host's calendar
ACTIVE_BOOKING_STATUSES = (
    BookingStatus.PENDING.value,
    BookingStatus.CONFIRMED.value,
    BookingStatus.COMPLETED.value,
)


class AddOnService(str, Enum):
    """Optional extras a guest can add to a session."""

    SCREEN_SHARING = "screen_sharing"
    TRANSLATION = "translation"
    RECORDING = "recording"
    TRANSCRIPTION = "transcription"

    @property
    def price_key(self) -> str:
        return f"{self.value}_price"

    @property
    def pricing_flag(self) -> str:
        return f"includes_{self.value}"


class BookingRole(str, Enum):
    """Which side of a booking a listing is filtered on."""

    HOST = "host"
    GUEST = "guest"
