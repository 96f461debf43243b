# backend/dialoom/services/notification_service.py
"""
Booking notifications for hosts and guests.

Notifications are sent after the booking change has been committed and are
best effort: a failed delivery is logged and reported through the return
value, it never undoes the booking change.
"""

import logging
from typing import Any, Optional, Union

from jinja2 import TemplateNotFound
from sqlalchemy.orm import Session

from ..core.exceptions import ServiceException
from ..models.booking import Booking
from ..models.user import User
from .base import BaseService
from .email import EmailService, get_email_service
from .email_console import ConsoleEmailService
from .template_service import TemplateService

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """Sends booking lifecycle emails through the configured email provider."""

    def __init__(
        self,
        db: Session,
        template_service: Optional[TemplateService] = None,
        email_service: Optional[Union[EmailService, ConsoleEmailService]] = None,
    ) -> None:
        super().__init__(db)
        self.template_service = template_service or TemplateService()
        self.email_service = email_service or get_email_service(db)

    def _send(self, to_email: str, subject: str, template_name: str, **context: Any) -> bool:
        try:
            html = self.template_service.render_template(template_name, **context)
        except TemplateNotFound as e:
            self.logger.error(f"Template error: {str(e)}")
            raise ServiceException(f"Email template error: {str(e)}") from e
        try:
            self.email_service.send_email(to_email=to_email, subject=subject, html_content=html)
            return True
        except Exception as e:
            self.logger.error(f"Failed to send '{subject}' to {to_email}: {str(e)}")
            return False

    @BaseService.measure_operation("send_booking_created")
    def send_booking_created(self, booking: Booking, host: User, guest: User) -> bool:
        """Tell the host about a new request and the guest that it was received."""
        context = {
            "booking": booking,
            "host_name": host.full_name,
            "guest_name": guest.full_name,
            "services": [name.replace("_", " ") for name in booking.selected_services],
        }
        host_ok = self._send(
            host.email, "New booking request", "email/booking_created_host.html", **context
        )
        guest_ok = self._send(
            guest.email, "Your booking request", "email/booking_created_guest.html", **context
        )
        if not (host_ok and guest_ok):
            self.logger.warning(f"Some booking emails failed for booking {booking.id}")
        return host_ok and guest_ok

    @BaseService.measure_operation("send_booking_confirmed")
    def send_booking_confirmed(self, booking: Booking, host: User, guest: User) -> bool:
        results = [
            self._send(
                user.email,
                "Booking confirmed",
                "email/booking_confirmed.html",
                booking=booking,
                recipient_name=user.full_name,
            )
            for user in (host, guest)
        ]
        return all(results)

    @BaseService.measure_operation("send_booking_cancelled")
    def send_booking_cancelled(
        self, booking: Booking, host: User, guest: User, cancelled_by: User
    ) -> bool:
        """Notify both parties; the one who cancelled gets a receipt."""
        results = [
            self._send(
                user.email,
                "Booking cancelled",
                "email/booking_cancelled.html",
                booking=booking,
                recipient_name=user.full_name,
                cancelled_by_name=cancelled_by.full_name,
            )
            for user in (host, guest)
        ]
        return all(results)
