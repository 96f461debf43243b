# backend/dialoom/repositories/__init__.py
"""Data access layer. Repositories flush but never commit."""

from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .host_availability_repository import HostAvailabilityRepository
from .host_pricing_repository import HostPricingRepository
from .platform_config_repository import PlatformConfigRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "HostAvailabilityRepository",
    "HostPricingRepository",
    "IRepository",
    "PlatformConfigRepository",
    "RepositoryFactory",
    "UserRepository",
]
