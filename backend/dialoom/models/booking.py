# backend/dialoom/models/booking.py
"""
Booking model for the Dialoom platform.

A booking reserves a host for a video session starting at
``scheduled_date`` + ``start_time`` and lasting ``duration`` minutes. The
occupied interval is half-open, so a session ending at 11:00 does not clash
with one starting at 11:00, and it may run past midnight.
"""

from datetime import date, datetime, time, timedelta, timezone
import logging
from typing import Any, Optional, cast

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.constants import DEFAULT_CURRENCY
from ..core.enums import AddOnService, BookingStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class Booking(Base):
    """Reservation of a host's time by a guest."""

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    host_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    guest_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    scheduled_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    duration = Column(Integer, nullable=False)  # minutes

    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    notes = Column(Text, nullable=True)

    # Add-on services selected at booking time
    screen_sharing = Column(Boolean, nullable=False, default=False)
    translation = Column(Boolean, nullable=False, default=False)
    recording = Column(Boolean, nullable=False, default=False)
    transcription = Column(Boolean, nullable=False, default=False)

    payment_intent_id = Column(String(255), nullable=True, comment="Stripe payment intent")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    cancelled_by_id = Column(String(64), ForeignKey("users.id"), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    host = relationship("User", foreign_keys=[host_id], backref="host_bookings")
    guest = relationship("User", foreign_keys=[guest_id], backref="guest_bookings")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="ck_bookings_status",
        ),
        CheckConstraint("duration > 0", name="check_duration_positive"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint("host_id <> guest_id", name="check_not_self_booking"),
        Index("ix_bookings_host_date_status", "host_id", "scheduled_date", "status"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value
        if not self.currency:
            self.currency = DEFAULT_CURRENCY
        for service in AddOnService:
            if getattr(self, service.value) is None:
                setattr(self, service.value, False)

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: host={self.host_id}, guest={self.guest_id}, "
            f"date={self.scheduled_date}, start={self.start_time}, "
            f"duration={self.duration}, status={self.status}>"
        )

    @property
    def start_datetime(self) -> datetime:
        return datetime.combine(cast(date, self.scheduled_date), cast(time, self.start_time))

    @property
    def end_datetime(self) -> datetime:
        return self.start_datetime + timedelta(minutes=int(self.duration))

    @property
    def end_time(self) -> time:
        return self.end_datetime.time()

    @property
    def selected_services(self) -> list[str]:
        return [service.value for service in AddOnService if getattr(self, service.value)]

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open interval test against [start, end)."""
        return start < self.end_datetime and end > self.start_datetime

    @property
    def is_cancellable(self) -> bool:
        return self.status in (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)

    def is_participant(self, user_id: str) -> bool:
        return user_id in (self.host_id, self.guest_id)

    def confirm(self, payment_intent_id: Optional[str] = None) -> None:
        """Mark booking as confirmed after payment capture."""
        self.status = BookingStatus.CONFIRMED.value
        self.confirmed_at = datetime.now(timezone.utc)
        if payment_intent_id:
            self.payment_intent_id = payment_intent_id
        logger.info(f"Booking {self.id} confirmed")

    def cancel(self, cancelled_by_user_id: str, reason: Optional[str] = None) -> None:
        """Cancel this booking."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = datetime.now(timezone.utc)
        self.cancelled_by_id = cancelled_by_user_id
        self.cancellation_reason = reason
        logger.info(f"Booking {self.id} cancelled by user {cancelled_by_user_id}")

    def complete(self) -> None:
        """Mark booking as completed."""
        self.status = BookingStatus.COMPLETED.value
        self.completed_at = datetime.now(timezone.utc)
        logger.info(f"Booking {self.id} marked as completed")
