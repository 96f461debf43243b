# backend/dialoom/services/availability_service.py
"""
Host availability windows.

Windows are informational for guests; the booking pipeline only enforces
the host's existing bookings. Windows for the same date, or the same
weekday, may not overlap each other.
"""

from datetime import date, time
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    AvailabilityOverlapException,
    NotFoundException,
    ValidationException,
)
from ..models.host_availability import HostAvailability
from ..models.user import User
from ..repositories import RepositoryFactory
from ..repositories.host_availability_repository import HostAvailabilityRepository
from .base import BaseService
from .host_verification_service import require_host_account

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


class AvailabilityService(BaseService):
    """Publish and read host availability windows."""

    def __init__(self, db: Session, repository: Optional[HostAvailabilityRepository] = None):
        super().__init__(db)
        self.repository = (
            repository or RepositoryFactory.create_host_availability_repository(db)
        )

    def list_for_host(self, host_id: str) -> List[HostAvailability]:
        return self.repository.list_for_host(host_id)

    @BaseService.measure_operation("add_availability")
    def add_availability(
        self,
        host: User,
        start_time: time,
        end_time: time,
        specific_date: Optional[date] = None,
        day_of_week: Optional[int] = None,
    ) -> HostAvailability:
        """
        Publish a new window.

        Raises:
            ForbiddenException: User has no host account
            ValidationException: Bad combination of date/weekday or time order
            AvailabilityOverlapException: Window overlaps an existing one
        """
        require_host_account(host)
        if (specific_date is None) == (day_of_week is None):
            raise ValidationException("Provide either a date or a day of week, not both")
        if start_time >= end_time:
            raise ValidationException("Start time must be before end time")

        for window in self.repository.list_for_host(host.id):
            same_slot = (specific_date is not None and window.date == specific_date) or (
                day_of_week is not None and window.day_of_week == day_of_week
            )
            if same_slot and start_time < window.end_time and end_time > window.start_time:
                when = (
                    specific_date.isoformat()
                    if specific_date is not None
                    else WEEKDAY_NAMES[day_of_week]  # type: ignore[index]
                )
                raise AvailabilityOverlapException(
                    when,
                    f"{start_time:%H:%M}-{end_time:%H:%M}",
                    f"{window.start_time:%H:%M}-{window.end_time:%H:%M}",
                )

        self.log_operation("add_availability", host_id=host.id)
        with self.transaction():
            return self.repository.create(
                host_id=host.id,
                date=specific_date,
                day_of_week=day_of_week,
                start_time=start_time,
                end_time=end_time,
            )

    @BaseService.measure_operation("delete_availability")
    def delete_availability(self, host: User, availability_id: str) -> None:
        window = self.repository.get_for_host(availability_id, host.id)
        if window is None:
            raise NotFoundException("Availability window not found")
        with self.transaction():
            self.repository.delete(window.id)
