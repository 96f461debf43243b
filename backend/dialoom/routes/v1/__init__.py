# backend/dialoom/routes/v1/__init__.py
"""Versioned API routers."""

from . import admin_config, admin_hosts, bookings, hosts

__all__ = ["admin_config", "admin_hosts", "bookings", "hosts"]
