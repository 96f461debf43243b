# backend/dialoom/repositories/booking_repository.py
"""
Booking Repository for the Dialoom booking API.

Candidate queries here are deliberately coarse (whole days); the exact
half-open interval test lives in the conflict checker service so that
sessions crossing midnight are handled in one place.
"""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.enums import ACTIVE_BOOKING_STATUSES, BookingRole
from ..models.booking import Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def list_active_for_host(
        self,
        host_id: str,
        start_date: date,
        end_date: date,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Non-cancelled bookings of a host scheduled between two dates inclusive.

        Args:
            host_id: Host whose calendar is inspected
            start_date: First scheduled date to include
            end_date: Last scheduled date to include
            exclude_booking_id: Optional booking to leave out

        Returns:
            Bookings ordered by date and start time
        """
        query = self._build_query().filter(
            Booking.host_id == host_id,
            Booking.scheduled_date >= start_date,
            Booking.scheduled_date <= end_date,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        )
        if exclude_booking_id:
            query = query.filter(Booking.id != exclude_booking_id)
        return self._execute_query(
            query.order_by(Booking.scheduled_date.asc(), Booking.start_time.asc())
        )

    def list_for_user(
        self,
        user_id: str,
        role: Optional[BookingRole] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        """Bookings where the user is host, guest, or either when ``role`` is None."""
        query = self._build_query()
        if role == BookingRole.HOST:
            query = query.filter(Booking.host_id == user_id)
        elif role == BookingRole.GUEST:
            query = query.filter(Booking.guest_id == user_id)
        else:
            query = query.filter((Booking.host_id == user_id) | (Booking.guest_id == user_id))
        if status:
            query = query.filter(Booking.status == status)
        return self._execute_query(
            query.order_by(Booking.scheduled_date.desc(), Booking.start_time.desc())
        )
