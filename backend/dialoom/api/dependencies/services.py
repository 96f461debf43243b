# backend/dialoom/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Every service is built per request from the request's database session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.config_service import ConfigService
from ...services.host_verification_service import HostVerificationService
from ...services.notification_service import NotificationService
from ...services.pricing_service import PricingService
from .database import get_db


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_pricing_service(db: Session = Depends(get_db)) -> PricingService:
    return PricingService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
    pricing_service: PricingService = Depends(get_pricing_service),
) -> BookingService:
    return BookingService(
        db,
        pricing_service=pricing_service,
        notification_service=notification_service,
    )


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_host_verification_service(db: Session = Depends(get_db)) -> HostVerificationService:
    return HostVerificationService(db)


def get_config_service(db: Session = Depends(get_db)) -> ConfigService:
    return ConfigService(db)
