# backend/dialoom/repositories/host_pricing_repository.py
"""Rate card data access."""

from typing import Any, Dict, List, Optional, cast

from sqlalchemy.orm import Session

from ..models.host_pricing import HostPricing
from .base_repository import BaseRepository


class HostPricingRepository(BaseRepository[HostPricing]):
    """Repository for host rate card entries."""

    def __init__(self, db: Session):
        super().__init__(db, HostPricing)

    def list_for_host(self, host_id: str, active_only: bool = True) -> List[HostPricing]:
        query = self._build_query().filter(HostPricing.host_id == host_id)
        if active_only:
            query = query.filter(HostPricing.is_active.is_(True))
        return self._execute_query(query.order_by(HostPricing.duration.asc()))

    def get_active_for_duration(self, host_id: str, duration: int) -> Optional[HostPricing]:
        result = (
            self._build_query()
            .filter(
                HostPricing.host_id == host_id,
                HostPricing.duration == duration,
                HostPricing.is_active.is_(True),
            )
            .first()
        )
        return cast(Optional[HostPricing], result)

    def replace_for_host(self, host_id: str, entries: List[Dict[str, Any]]) -> List[HostPricing]:
        """Swap the host's whole rate card for ``entries``. Caller owns the transaction."""
        self._build_query().filter(HostPricing.host_id == host_id).delete(
            synchronize_session=False
        )
        self.db.flush()
        created = [self.create(host_id=host_id, **entry) for entry in entries]
        return sorted(created, key=lambda entry: entry.duration)
