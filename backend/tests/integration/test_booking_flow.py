# backend/tests/integration/test_booking_flow.py
"""
Booking pipeline against the real database, no mocked collaborators.
"""

from datetime import date, time
from decimal import Decimal

import pytest
from ulid import ULID

from dialoom.core.enums import AddOnService, BookingStatus, HostVerificationStatus
from dialoom.core.exceptions import (
    BookingConflictException,
    HostNotVerifiedException,
    NotFoundException,
    PriceMismatchException,
)
from dialoom.models import Booking
from dialoom.services.booking_service import BookingService
from dialoom.services.email_console import ConsoleEmailService
from dialoom.services.notification_service import NotificationService


@pytest.fixture
def outbox():
    return ConsoleEmailService()


@pytest.fixture
def booking_service(db, outbox):
    return BookingService(db, notification_service=NotificationService(db, email_service=outbox))


def _request(guest, host, **overrides):
    request = dict(
        guest_id=guest.id,
        host_id=host.id,
        scheduled_date=date(2024, 1, 1),
        start_time=time(10, 0),
        duration=60,
        price=Decimal("100"),
    )
    request.update(overrides)
    return request


def test_happy_path_persists_pending_booking(db, booking_service, verified_host, guest, outbox):
    booking = booking_service.create_booking(
        **_request(guest, verified_host, price=Decimal("110.00")),
        services=[AddOnService.TRANSLATION],
        notes="  First session  ",
    )

    stored = db.query(Booking).filter(Booking.id == booking.id).one()
    assert str(ULID.from_str(stored.id)) == stored.id
    assert stored.status == BookingStatus.PENDING.value
    assert stored.price == Decimal("110.00")
    assert stored.translation is True
    assert stored.recording is False
    assert stored.selected_services == ["translation"]
    assert stored.end_time == time(11, 0)
    assert {mail["to"] for mail in outbox.sent} == {"host@example.com", "guest@example.com"}


def test_registered_host_rejected_and_nothing_written(db, booking_service, make_user, guest):
    host1 = make_user(host_status=HostVerificationStatus.REGISTERED)

    with pytest.raises(HostNotVerifiedException):
        booking_service.create_booking(**_request(guest, host1))

    assert db.query(Booking).count() == 0


def test_missing_host_wins_over_bad_price(booking_service, guest):
    with pytest.raises(NotFoundException):
        booking_service.create_booking(
            guest_id=guest.id,
            host_id="does-not-exist",
            scheduled_date=date(2024, 1, 1),
            start_time=time(10, 0),
            duration=60,
            price=Decimal("1"),
        )


def test_conflict_wins_over_bad_price(booking_service, verified_host, guest, make_booking):
    make_booking(verified_host, guest, date(2024, 1, 1), time(10, 0), 60)

    with pytest.raises(BookingConflictException):
        booking_service.create_booking(
            **_request(guest, verified_host, start_time=time(10, 30), price=Decimal("1"))
        )


def test_second_overlapping_request_is_rejected(db, booking_service, verified_host, guest):
    booking_service.create_booking(**_request(guest, verified_host))

    with pytest.raises(BookingConflictException):
        booking_service.create_booking(**_request(guest, verified_host, start_time=time(10, 30)))

    assert db.query(Booking).count() == 1


def test_price_mismatch_leaves_calendar_free(db, booking_service, verified_host, guest):
    with pytest.raises(PriceMismatchException):
        booking_service.create_booking(**_request(guest, verified_host, price=Decimal("99.90")))

    assert db.query(Booking).count() == 0
    booking = booking_service.create_booking(**_request(guest, verified_host))
    assert booking.status == BookingStatus.PENDING.value


def test_session_crossing_midnight(db, booking_service, make_rate, verified_host, guest):
    make_rate(verified_host, duration=90, price="150.00")
    booking_service.create_booking(
        **_request(guest, verified_host, start_time=time(23, 30), duration=90, price=Decimal("150"))
    )

    with pytest.raises(BookingConflictException):
        booking_service.create_booking(
            **_request(
                guest,
                verified_host,
                scheduled_date=date(2024, 1, 2),
                start_time=time(0, 30),
                duration=30,
                price=Decimal("55"),
            )
        )

    booking_service.create_booking(
        **_request(
            guest,
            verified_host,
            scheduled_date=date(2024, 1, 2),
            start_time=time(1, 0),
            duration=30,
            price=Decimal("55"),
        )
    )
    assert db.query(Booking).count() == 2
