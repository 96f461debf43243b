# backend/dialoom/services/email.py
"""
Email delivery through the Resend API.

``get_email_service`` picks the Resend-backed service when an API key is
configured and the console service otherwise.
"""

import logging
import re
from typing import Any, Dict, Optional, Union

import resend
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ServiceException
from .base import BaseService
from .email_console import ConsoleEmailService

logger = logging.getLogger(__name__)


class EmailService(BaseService):
    """Service for sending emails using Resend API."""

    def __init__(self, db: Session, api_key: Optional[str] = None):
        super().__init__(db)

        api_key = api_key or settings.resend_api_key
        if not api_key:
            raise ServiceException("Resend API key not configured")

        resend.api_key = api_key
        self.from_email = settings.from_email
        self.logger.info("EmailService initialized successfully")

    @staticmethod
    def _html_to_text(html_content: str) -> str:
        """Convert HTML content to plain text for better deliverability"""
        text = re.sub(r"<[^>]+>", "", html_content)
        return re.sub(r"\s+", " ", text).strip()

    @BaseService.measure_operation("send_email")
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email using Resend.

        Raises:
            ServiceException: If email sending fails
        """
        email_data = {
            "from": self.from_email,
            "to": to_email,
            "subject": subject,
            "html": html_content,
            "text": text_content or self._html_to_text(html_content),
        }
        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            self.logger.error(f"Failed to send email to {to_email}: {type(e).__name__}: {e}")
            self.log_operation("email_failed", to_email=to_email, subject=subject, error=str(e))
            raise ServiceException(f"Email sending failed: {e}") from e

        self.log_operation("email_sent", to_email=to_email, subject=subject)
        return dict(response) if response else {}


def get_email_service(db: Session) -> Union[EmailService, ConsoleEmailService]:
    if settings.email_provider == "resend" and settings.resend_api_key:
        return EmailService(db)
    return ConsoleEmailService()
