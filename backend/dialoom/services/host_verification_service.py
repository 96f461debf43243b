# backend/dialoom/services/host_verification_service.py
"""
Host verification workflow.

unregistered -> registered (user applies) -> verified | rejected (admin review).
A rejected user may apply again. Only verified hosts can receive bookings.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.enums import HostVerificationStatus
from ..core.exceptions import BusinessRuleException, ForbiddenException, NotFoundException
from ..models.user import User
from ..repositories import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


def require_host_account(user: User) -> None:
    """Only users who applied to host may publish host data."""
    if user.host_verification_status in (
        HostVerificationStatus.UNREGISTERED.value,
        HostVerificationStatus.REJECTED.value,
    ):
        raise ForbiddenException("Host account required", code="HOST_ACCOUNT_REQUIRED")


class HostVerificationService(BaseService):
    """Moves users through the host verification states."""

    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @staticmethod
    def _require_admin(actor: User) -> None:
        if not actor.is_admin:
            raise ForbiddenException("Admin access required", code="ADMIN_REQUIRED")

    def _get_user_or_404(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user

    @BaseService.measure_operation("apply_as_host")
    def apply_as_host(self, user: User) -> User:
        """Submit the user's host application for review."""
        status = user.host_verification_status
        if status == HostVerificationStatus.VERIFIED.value:
            raise BusinessRuleException("You are already a verified host", code="ALREADY_VERIFIED")
        if status == HostVerificationStatus.REGISTERED.value:
            return user

        self.log_operation("apply_as_host", user_id=user.id)
        with self.transaction():
            user.host_verification_status = HostVerificationStatus.REGISTERED.value
            user.verification_rejection_reason = None
        return user

    @BaseService.measure_operation("list_pending_hosts")
    def list_pending(self, actor: User) -> List[User]:
        self._require_admin(actor)
        return self.user_repository.list_by_verification_status(
            HostVerificationStatus.REGISTERED.value
        )

    @BaseService.measure_operation("approve_host")
    def approve(self, user_id: str, actor: User) -> User:
        """Verify a host. Approving an already verified host changes nothing."""
        self._require_admin(actor)
        user = self._get_user_or_404(user_id)
        if user.host_verification_status == HostVerificationStatus.VERIFIED.value:
            return user

        self.log_operation("approve_host", user_id=user_id, admin_id=actor.id)
        with self.transaction():
            user.approve_host(actor.id)
        return user

    @BaseService.measure_operation("reject_host")
    def reject(self, user_id: str, actor: User, reason: Optional[str] = None) -> User:
        self._require_admin(actor)
        user = self._get_user_or_404(user_id)

        self.log_operation("reject_host", user_id=user_id, admin_id=actor.id)
        with self.transaction():
            user.reject_host(actor.id, reason)
        return user
