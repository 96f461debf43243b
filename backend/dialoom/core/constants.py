# backend/dialoom/core/constants.py
"""Application-wide constants for the Dialoom booking API."""

from decimal import Decimal

BRAND_NAME = "Dialoom"
API_TITLE = f"{BRAND_NAME} Booking API"
API_VERSION = "1.0.0"

DEFAULT_CURRENCY = "EUR"

# Session length bounds (minutes)
MIN_SESSION_DURATION = 15
MAX_SESSION_DURATION = 720

# Money handling
CENTS = Decimal("0.01")
DEFAULT_PRICE_TOLERANCE = Decimal("0.01")
DEFAULT_COMMISSION_RATE = Decimal("0.10")
DEFAULT_VAT_RATE = Decimal("0.21")

# Add-on service prices, keyed by the platform config key that overrides them
ADDON_PRICE_DEFAULTS = {
    "screen_sharing_price": Decimal("5.00"),
    "translation_price": Decimal("10.00"),
    "recording_price": Decimal("8.00"),
    "transcription_price": Decimal("12.00"),
}

CONFLICT_MESSAGE = "Host already has a booking that overlaps this time"
INTERNAL_ERROR_MESSAGE = "An error occurred processing your request"
