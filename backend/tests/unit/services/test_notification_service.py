# backend/tests/unit/services/test_notification_service.py
from datetime import date, time
from unittest.mock import Mock, patch

import pytest

from dialoom.core.enums import BookingStatus
from dialoom.services.email import EmailService
from dialoom.services.email_console import ConsoleEmailService
from dialoom.services.notification_service import NotificationService
from dialoom.services.template_service import TemplateService, currency


@pytest.fixture
def console_email():
    return ConsoleEmailService()


@pytest.fixture
def booking(verified_host, guest, make_booking):
    return make_booking(verified_host, guest, date(2024, 1, 1), time(10, 0), 60)


def test_booking_created_emails_both_parties(db, booking, verified_host, guest, console_email):
    service = NotificationService(db, email_service=console_email)

    assert service.send_booking_created(booking, verified_host, guest) is True
    assert [(mail["to"], mail["subject"]) for mail in console_email.sent] == [
        ("host@example.com", "New booking request"),
        ("guest@example.com", "Your booking request"),
    ]


def test_host_email_mentions_session(db, booking, verified_host, guest):
    html = TemplateService().render_template(
        "email/booking_created_host.html",
        booking=booking,
        host_name=verified_host.full_name,
        guest_name=guest.full_name,
        services=["translation"],
    )

    assert "Grace Guest" in html
    assert "10:00" in html
    assert "translation" in html
    assert "€100.00" in html


def test_delivery_failure_is_reported_not_raised(db, booking, verified_host, guest):
    failing = Mock()
    failing.send_email.side_effect = RuntimeError("provider down")
    service = NotificationService(db, email_service=failing)

    assert service.send_booking_created(booking, verified_host, guest) is False


def test_cancellation_emails(db, booking, verified_host, guest, console_email):
    booking.status = BookingStatus.CANCELLED.value
    service = NotificationService(db, email_service=console_email)

    assert service.send_booking_cancelled(booking, verified_host, guest, guest) is True
    assert len(console_email.sent) == 2


def test_currency_filter():
    assert currency(12.5) == "€12.50"
    assert currency(None) == "€0.00"


def test_resend_service_sends_through_api(db):
    with patch("dialoom.services.email.resend.Emails.send") as mocked_send:
        mocked_send.return_value = {"id": "email-1"}
        service = EmailService(db, api_key="re_test")

        result = service.send_email("guest@example.com", "Hello", "<p>Hi there</p>")

    assert result == {"id": "email-1"}
    payload = mocked_send.call_args.args[0]
    assert payload["to"] == "guest@example.com"
    assert payload["text"] == "Hi there"
