# backend/dialoom/repositories/host_availability_repository.py
"""Host availability data access."""

from typing import List, Optional, cast

from sqlalchemy.orm import Session

from ..models.host_availability import HostAvailability
from .base_repository import BaseRepository


class HostAvailabilityRepository(BaseRepository[HostAvailability]):
    """Repository for host availability windows."""

    def __init__(self, db: Session):
        super().__init__(db, HostAvailability)

    def list_for_host(self, host_id: str, active_only: bool = True) -> List[HostAvailability]:
        query = self._build_query().filter(HostAvailability.host_id == host_id)
        if active_only:
            query = query.filter(HostAvailability.is_active.is_(True))
        return self._execute_query(
            query.order_by(
                HostAvailability.date.asc(),
                HostAvailability.day_of_week.asc(),
                HostAvailability.start_time.asc(),
            )
        )

    def get_for_host(self, availability_id: str, host_id: str) -> Optional[HostAvailability]:
        result = (
            self._build_query()
            .filter(HostAvailability.id == availability_id, HostAvailability.host_id == host_id)
            .first()
        )
        return cast(Optional[HostAvailability], result)
