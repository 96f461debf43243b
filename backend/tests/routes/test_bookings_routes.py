# backend/tests/routes/test_bookings_routes.py
"""
HTTP tests for /api/bookings.

Requests go through token verification, the problem-details error envelope
and the real booking pipeline on the test database.
"""

import asyncio
from datetime import date, time
from decimal import Decimal
from unittest.mock import patch

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session

from dialoom.core.constants import INTERNAL_ERROR_MESSAGE
from dialoom.core.enums import BookingStatus, HostVerificationStatus
from dialoom.core.exceptions import RepositoryException
from dialoom.models import Booking


def _payload(host_id: str, **overrides):
    payload = {
        "hostId": host_id,
        "scheduledDate": "2024-01-01",
        "startTime": "10:00",
        "duration": 60,
        "price": 100,
    }
    payload.update(overrides)
    return payload


class TestCreateBooking:
    def test_unverified_host_is_forbidden(
        self, client: TestClient, db: Session, make_user, make_rate, auth_headers_guest
    ):
        host1 = make_user(email="host1@example.com", host_status=HostVerificationStatus.REGISTERED)
        make_rate(host1, duration=60, price="100.00")

        response = client.post(
            "/api/bookings", json=_payload(host1.id), headers=auth_headers_guest
        )

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "HOST_NOT_VERIFIED"
        assert body["status"] == 403
        assert db.query(Booking).count() == 0

    def test_unknown_host_is_not_found(self, client: TestClient, db: Session, auth_headers_guest):
        response = client.post(
            "/api/bookings",
            json=_payload("01HZZZZZZZZZZZZZZZZZZZZZZZ"),
            headers=auth_headers_guest,
        )

        assert response.status_code == 404
        assert db.query(Booking).count() == 0

    def test_valid_request_creates_pending_booking(
        self, client: TestClient, db: Session, verified_host, guest, auth_headers_guest
    ):
        response = client.post(
            "/api/bookings", json=_payload(verified_host.id), headers=auth_headers_guest
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["hostId"] == verified_host.id
        assert data["guestId"] == guest.id
        assert data["startTime"] == "10:00"
        assert data["endTime"] == "11:00"
        assert Decimal(data["price"]) == Decimal("100")
        assert data["selectedServices"] == []

        stored = db.query(Booking).one()
        assert stored.status == BookingStatus.PENDING.value

    def test_snake_case_payload_is_accepted(
        self, client: TestClient, verified_host, auth_headers_guest
    ):
        response = client.post(
            "/api/bookings",
            json={
                "host_id": verified_host.id,
                "scheduled_date": "2024-01-01",
                "start_time": "14:00",
                "duration": 60,
                "price": "110.00",
                "selected_services": ["translation"],
            },
            headers=auth_headers_guest,
        )

        assert response.status_code == 201
        assert response.json()["selectedServices"] == ["translation"]

    def test_overlapping_request_is_conflict(
        self,
        client: TestClient,
        db: Session,
        verified_host,
        guest,
        make_user,
        make_booking,
        auth_headers_guest,
    ):
        other_guest = make_user()
        make_booking(verified_host, other_guest, date(2024, 1, 1), time(10, 0), 60)

        response = client.post(
            "/api/bookings",
            json=_payload(verified_host.id, startTime="10:30"),
            headers=auth_headers_guest,
        )

        assert response.status_code == 409
        assert response.json()["code"] == "BOOKING_CONFLICT"
        assert db.query(Booking).count() == 1

    def test_back_to_back_sessions_are_allowed(
        self, client: TestClient, verified_host, auth_headers_guest
    ):
        first = client.post(
            "/api/bookings", json=_payload(verified_host.id), headers=auth_headers_guest
        )
        second = client.post(
            "/api/bookings",
            json=_payload(verified_host.id, startTime="11:00"),
            headers=auth_headers_guest,
        )

        assert first.status_code == 201
        assert second.status_code == 201

    def test_price_mismatch_is_bad_request(
        self, client: TestClient, db: Session, verified_host, auth_headers_guest
    ):
        response = client.post(
            "/api/bookings",
            json=_payload(verified_host.id, price=80),
            headers=auth_headers_guest,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "PRICE_MISMATCH"
        assert body["errors"]["expected"] == "100.00"
        assert db.query(Booking).count() == 0

    def test_booking_yourself_is_bad_request(
        self, client: TestClient, verified_host, auth_headers_host
    ):
        response = client.post(
            "/api/bookings", json=_payload(verified_host.id), headers=auth_headers_host
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "overrides",
        [
            {"duration": 5},
            {"duration": -5},
            {"duration": 1000},
            {"price": -1},
            {"price": "100.001"},
            {"startTime": "10:00:30"},
            {"scheduledDate": "2024-01-01T10:00:00"},
            {"unexpected": True},
        ],
    )
    def test_malformed_payload_is_bad_request(
        self, client: TestClient, db: Session, verified_host, auth_headers_guest, overrides
    ):
        response = client.post(
            "/api/bookings",
            json=_payload(verified_host.id, **overrides),
            headers=auth_headers_guest,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "validation_error"
        assert body["errors"]
        assert db.query(Booking).count() == 0

    def test_missing_host_id_is_bad_request(self, client: TestClient, auth_headers_guest):
        payload = _payload("ignored")
        del payload["hostId"]

        response = client.post("/api/bookings", json=payload, headers=auth_headers_guest)

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["errors"][0]["loc"][-1] == "hostId"

    def test_requires_authentication(self, client: TestClient, verified_host):
        response = client.post("/api/bookings", json=_payload(verified_host.id))

        assert response.status_code == 401

    def test_persistence_failure_is_opaque(
        self, client: TestClient, db: Session, verified_host, auth_headers_guest
    ):
        with patch(
            "dialoom.repositories.booking_repository.BookingRepository.create",
            side_effect=RepositoryException("relation bookings violates constraint xyz"),
        ):
            response = client.post(
                "/api/bookings", json=_payload(verified_host.id), headers=auth_headers_guest
            )

        assert response.status_code == 500
        body = response.json()
        assert body["detail"] == INTERNAL_ERROR_MESSAGE
        assert "xyz" not in response.text
        assert db.query(Booking).count() == 0

    def test_identical_rejections_have_identical_bodies(
        self, client: TestClient, make_user, auth_headers_guest
    ):
        host1 = make_user(host_status=HostVerificationStatus.REGISTERED)

        first = client.post("/api/bookings", json=_payload(host1.id), headers=auth_headers_guest)
        second = client.post("/api/bookings", json=_payload(host1.id), headers=auth_headers_guest)

        assert first.status_code == second.status_code == 403
        assert first.json() == second.json()


class TestBookingReads:
    def test_participants_can_read_booking(
        self, client: TestClient, verified_host, guest, make_booking, auth_headers_guest
    ):
        booking = make_booking(verified_host, guest)

        response = client.get(f"/api/bookings/{booking.id}", headers=auth_headers_guest)

        assert response.status_code == 200
        assert response.json()["id"] == booking.id

    def test_strangers_are_forbidden(
        self,
        client: TestClient,
        verified_host,
        guest,
        make_user,
        make_booking,
        auth_headers_for,
    ):
        booking = make_booking(verified_host, guest)
        stranger = make_user()

        response = client.get(f"/api/bookings/{booking.id}", headers=auth_headers_for(stranger))

        assert response.status_code == 403

    def test_list_by_role(
        self,
        client: TestClient,
        verified_host,
        guest,
        make_booking,
        auth_headers_guest,
        auth_headers_host,
    ):
        make_booking(verified_host, guest)

        as_guest = client.get("/api/bookings/user?role=guest", headers=auth_headers_guest)
        as_host_for_guest_role = client.get(
            "/api/bookings/user?role=guest", headers=auth_headers_host
        )
        as_host = client.get("/api/bookings/user?role=host", headers=auth_headers_host)

        assert len(as_guest.json()) == 1
        assert as_host_for_guest_role.json() == []
        assert len(as_host.json()) == 1

    def test_check_availability(
        self, client: TestClient, verified_host, guest, make_booking, auth_headers_guest
    ):
        make_booking(verified_host, guest, date(2024, 1, 1), time(10, 0), 60)

        busy = client.post(
            "/api/bookings/check-availability",
            json={
                "hostId": verified_host.id,
                "scheduledDate": "2024-01-01",
                "startTime": "10:30",
                "duration": 30,
            },
            headers=auth_headers_guest,
        )
        free = client.post(
            "/api/bookings/check-availability",
            json={
                "hostId": verified_host.id,
                "scheduledDate": "2024-01-01",
                "startTime": "11:00",
                "duration": 30,
            },
            headers=auth_headers_guest,
        )

        assert busy.json()["available"] is False
        assert busy.json()["conflicts"] == [
            {"scheduledDate": "2024-01-01", "startTime": "10:00", "endTime": "11:00"}
        ]
        assert free.json() == {"available": True, "reason": None, "conflicts": []}

    def test_quote(self, client: TestClient, verified_host, auth_headers_guest):
        response = client.post(
            "/api/bookings/quote",
            json={
                "hostId": verified_host.id,
                "duration": 60,
                "selectedServices": ["translation"],
            },
            headers=auth_headers_guest,
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total"]) == Decimal("110.00")
        assert Decimal(data["commission"]) == Decimal("11.00")
        assert Decimal(data["vat"]) == Decimal("2.31")
        assert Decimal(data["hostAmount"]) == Decimal("96.69")

    def test_quote_prices_and_splits_in_one_worker_call(
        self, client: TestClient, verified_host, auth_headers_guest
    ):
        offloaded = []
        run_in_thread = asyncio.to_thread

        async def recording_to_thread(func, *args, **kwargs):
            offloaded.append(func.__name__)
            return await run_in_thread(func, *args, **kwargs)

        with patch("dialoom.routes.v1.bookings.asyncio.to_thread", new=recording_to_thread):
            response = client.post(
                "/api/bookings/quote",
                json={"hostId": verified_host.id, "duration": 30},
                headers=auth_headers_guest,
            )

        assert response.status_code == 200
        assert Decimal(response.json()["hostAmount"]) == Decimal("48.34")
        assert offloaded == ["quote_with_breakdown"]


class TestBookingLifecycleRoutes:
    def test_cancel_then_cancel_again(
        self, client: TestClient, verified_host, guest, make_booking, auth_headers_guest
    ):
        booking = make_booking(verified_host, guest)

        first = client.put(
            f"/api/bookings/{booking.id}/cancel",
            json={"reason": "Something came up"},
            headers=auth_headers_guest,
        )
        second = client.put(f"/api/bookings/{booking.id}/cancel", headers=auth_headers_guest)

        assert first.status_code == 200
        assert first.json()["status"] == "cancelled"
        assert first.json()["cancellationReason"] == "Something came up"
        assert second.status_code == 422

    def test_cancelled_slot_can_be_rebooked(
        self, client: TestClient, verified_host, guest, make_booking, auth_headers_guest
    ):
        booking = make_booking(verified_host, guest)
        client.put(f"/api/bookings/{booking.id}/cancel", headers=auth_headers_guest)

        response = client.post(
            "/api/bookings", json=_payload(verified_host.id), headers=auth_headers_guest
        )

        assert response.status_code == 201

    def test_confirm_payment_and_complete(
        self,
        client: TestClient,
        verified_host,
        guest,
        make_booking,
        auth_headers_guest,
        auth_headers_host,
    ):
        booking = make_booking(verified_host, guest)

        with patch(
            "dialoom.services.stripe_service.StripeService.is_payment_captured",
            return_value=True,
        ):
            confirmed = client.post(
                f"/api/bookings/{booking.id}/confirm-payment",
                json={"paymentIntentId": "pi_123"},
                headers=auth_headers_guest,
            )
        completed = client.post(f"/api/bookings/{booking.id}/complete", headers=auth_headers_host)

        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"
        assert confirmed.json()["paymentIntentId"] == "pi_123"
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"

    def test_uncaptured_payment_is_rejected(
        self, client: TestClient, verified_host, guest, make_booking, auth_headers_guest
    ):
        booking = make_booking(verified_host, guest)

        with patch(
            "dialoom.services.stripe_service.StripeService.is_payment_captured",
            return_value=False,
        ):
            response = client.post(
                f"/api/bookings/{booking.id}/confirm-payment",
                json={"paymentIntentId": "pi_123"},
                headers=auth_headers_guest,
            )

        assert response.status_code == 422
        assert response.json()["code"] == "PAYMENT_NOT_CAPTURED"
