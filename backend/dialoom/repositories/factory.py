# backend/dialoom/repositories/factory.py
"""
Repository Factory for the Dialoom booking API.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .host_availability_repository import HostAvailabilityRepository
    from .host_pricing_repository import HostPricingRepository
    from .platform_config_repository import PlatformConfigRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_host_pricing_repository(db: Session) -> "HostPricingRepository":
        from .host_pricing_repository import HostPricingRepository

        return HostPricingRepository(db)

    @staticmethod
    def create_host_availability_repository(db: Session) -> "HostAvailabilityRepository":
        from .host_availability_repository import HostAvailabilityRepository

        return HostAvailabilityRepository(db)

    @staticmethod
    def create_platform_config_repository(db: Session) -> "PlatformConfigRepository":
        from .platform_config_repository import PlatformConfigRepository

        return PlatformConfigRepository(db)
