# backend/dialoom/services/conflict_checker.py
"""
Conflict Checker Service for the Dialoom booking API.

Two bookings for the same host conflict when their half-open intervals
[start, start + duration) intersect. Cancelled bookings never conflict.
Sessions are at most twelve hours long, so candidates from the day before
and the day after the requested date are enough to catch sessions that
cross midnight.
"""

from datetime import date, datetime, time, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def session_interval(
    scheduled_date: date, start_time: time, duration: int
) -> tuple[datetime, datetime]:
    """Return the [start, end) datetimes occupied by a session."""
    start = datetime.combine(scheduled_date, start_time)
    return start, start + timedelta(minutes=duration)


class ConflictChecker(BaseService):
    """Service for checking a host's calendar for overlapping bookings."""

    def __init__(self, db: Session, repository: Optional[BookingRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("check_booking_conflicts")
    def check_booking_conflicts(
        self,
        host_id: str,
        scheduled_date: date,
        start_time: time,
        duration: int,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find existing bookings that overlap the requested session.

        Args:
            host_id: The host to check
            scheduled_date: Date the requested session starts on
            start_time: Start time of the requested session
            duration: Length of the requested session in minutes
            exclude_booking_id: Optional booking ID to leave out of the check

        Returns:
            List of conflicts with booking details, empty when the slot is free
        """
        start, end = session_interval(scheduled_date, start_time, duration)
        candidates = self.repository.list_active_for_host(
            host_id,
            scheduled_date - timedelta(days=1),
            end.date(),
            exclude_booking_id=exclude_booking_id,
        )

        conflicts = []
        for booking in candidates:
            if booking.overlaps(start, end):
                conflicts.append(
                    {
                        "booking_id": booking.id,
                        "scheduled_date": booking.scheduled_date.isoformat(),
                        "start_time": booking.start_time.strftime("%H:%M"),
                        "end_time": booking.end_time.strftime("%H:%M"),
                        "duration": booking.duration,
                        "status": booking.status,
                    }
                )

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} booking conflicts for host {host_id} "
                f"between {start.isoformat()} and {end.isoformat()}"
            )

        return conflicts

    def has_conflict(
        self,
        host_id: str,
        scheduled_date: date,
        start_time: time,
        duration: int,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """Boolean shortcut over check_booking_conflicts."""
        return bool(
            self.check_booking_conflicts(
                host_id, scheduled_date, start_time, duration, exclude_booking_id
            )
        )
