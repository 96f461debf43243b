# backend/dialoom/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_active_user, get_current_admin_user, get_current_user
from .database import get_db
from .services import (
    get_availability_service,
    get_booking_service,
    get_config_service,
    get_host_verification_service,
    get_notification_service,
    get_pricing_service,
)

__all__ = [
    # Auth
    "get_current_user",
    "get_current_active_user",
    "get_current_admin_user",
    # Database
    "get_db",
    # Services
    "get_availability_service",
    "get_booking_service",
    "get_config_service",
    "get_host_verification_service",
    "get_notification_service",
    "get_pricing_service",
]
