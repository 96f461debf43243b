# backend/dialoom/models/__init__.py
"""SQLAlchemy models for the Dialoom booking API."""

from .booking import Booking
from .host_availability import HostAvailability
from .host_pricing import HostPricing
from .platform_config import PlatformConfig
from .user import User

__all__ = ["Booking", "HostAvailability", "HostPricing", "PlatformConfig", "User"]
