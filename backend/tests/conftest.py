# backend/tests/conftest.py
"""
Pytest configuration for the Dialoom backend.

Every test gets a fresh in-memory SQLite schema. Route tests go through the
real token verification: auth headers carry tokens signed with the test
secret, and the user is looked up in the test session.
"""

import os

# Set testing mode BEFORE any dialoom imports so the engine binds to the test database
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("EMAIL_PROVIDER", "console")
os.environ.pop("STRIPE_SECRET_KEY", None)

from datetime import date, time
from decimal import Decimal
from typing import Any, Callable, Dict, Iterator, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session

from dialoom.api.dependencies.database import get_db
from dialoom.auth import create_access_token
from dialoom.core.enums import BookingStatus, HostVerificationStatus
from dialoom.database import Base, SessionLocal, engine
from dialoom.main import app
from dialoom.models import Booking, HostPricing, User


@pytest.fixture(scope="function")
def db() -> Iterator[Session]:
    """Create the schema, yield a session, drop everything afterwards."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """Create a test client bound to the test session."""

    def override_get_db() -> Iterator[Session]:
        yield db

    app.dependency_overrides[get_db] = override_get_db

    # No context manager: the lifespan would create tables on the shared engine again
    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


# ============================================================================
# FACTORIES
# ============================================================================


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make_user(
        email: Optional[str] = None,
        host_status: HostVerificationStatus = HostVerificationStatus.UNREGISTERED,
        **fields: Any,
    ) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            first_name=fields.pop("first_name", "Test"),
            last_name=fields.pop("last_name", f"User{counter['n']}"),
            host_verification_status=host_status.value,
            is_active=fields.pop("is_active", True),
            is_admin=fields.pop("is_admin", False),
            **fields,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_rate(db: Session) -> Callable[..., HostPricing]:
    def _make_rate(
        host: User, duration: int = 60, price: str = "100.00", **flags: Any
    ) -> HostPricing:
        rate = HostPricing(
            host_id=host.id,
            duration=duration,
            price=Decimal(price),
            currency="EUR",
            is_active=flags.pop("is_active", True),
            **flags,
        )
        db.add(rate)
        db.commit()
        return rate

    return _make_rate


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    def _make_booking(
        host: User,
        guest: User,
        scheduled_date: date = date(2024, 1, 1),
        start_time: time = time(10, 0),
        duration: int = 60,
        status: BookingStatus = BookingStatus.PENDING,
        price: str = "100.00",
    ) -> Booking:
        booking = Booking(
            host_id=host.id,
            guest_id=guest.id,
            scheduled_date=scheduled_date,
            start_time=start_time,
            duration=duration,
            price=Decimal(price),
            status=status.value,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make_booking


@pytest.fixture
def guest(make_user: Callable[..., User]) -> User:
    return make_user(email="guest@example.com", first_name="Grace", last_name="Guest")


@pytest.fixture
def verified_host(make_user: Callable[..., User], make_rate: Callable[..., HostPricing]) -> User:
    """Verified host publishing 30 and 60 minute sessions, translation offered on 60."""
    host = make_user(
        email="host@example.com",
        host_status=HostVerificationStatus.VERIFIED,
        first_name="Henry",
        last_name="Host",
    )
    make_rate(host, duration=30, price="55.00")
    make_rate(host, duration=60, price="100.00", includes_translation=True)
    return host


@pytest.fixture
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user(email="admin@example.com", is_admin=True)


def _auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_for() -> Callable[[User], Dict[str, str]]:
    """Headers for an arbitrary user created inside a test."""
    return _auth_headers


@pytest.fixture
def auth_headers_guest(guest: User) -> Dict[str, str]:
    return _auth_headers(guest)


@pytest.fixture
def auth_headers_host(verified_host: User) -> Dict[str, str]:
    return _auth_headers(verified_host)


@pytest.fixture
def auth_headers_admin(admin_user: User) -> Dict[str, str]:
    return _auth_headers(admin_user)
