# backend/dialoom/models/user.py
"""
User model for the Dialoom platform.

Guests and hosts are the same ``User`` row. A user becomes bookable as a host
only once an admin has moved ``host_verification_status`` to ``verified``.
Ids come from the identity provider (Supabase UUIDs) or default to a ULID.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Optional

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from ..core.enums import HostVerificationStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Platform account.

    Attributes:
        id: Primary key (identity provider id or ULID)
        email: Unique email address
        first_name: User's first name
        last_name: User's last name
        is_admin: Whether the user may review host verifications
        is_active: Whether the account can act on the platform
        host_verification_status: unregistered, registered, verified or rejected
        stripe_customer_id: Customer record used when the user pays as a guest
    """

    __tablename__ = "users"

    id = Column(String(64), primary_key=True, index=True, default=generate_ulid)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    host_verification_status = Column(
        String(20),
        nullable=False,
        default=HostVerificationStatus.UNREGISTERED.value,
        index=True,
    )
    verified_at = Column(DateTime(timezone=True), nullable=True)
    verified_by_id = Column(String(64), ForeignKey("users.id"), nullable=True)
    verification_rejection_reason = Column(Text, nullable=True)

    stripe_customer_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "host_verification_status IN ('unregistered', 'registered', 'verified', 'rejected')",
            name="ck_users_host_verification_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email} host_status={self.host_verification_status}>"

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part) or self.email

    @property
    def is_verified_host(self) -> bool:
        return self.host_verification_status == HostVerificationStatus.VERIFIED.value

    def approve_host(self, admin_id: str) -> None:
        """Mark this user as a verified host."""
        self.host_verification_status = HostVerificationStatus.VERIFIED.value
        self.verified_at = datetime.now(timezone.utc)
        self.verified_by_id = admin_id
        self.verification_rejection_reason = None
        logger.info(f"User {self.id} approved as host by {admin_id}")

    def reject_host(self, admin_id: str, reason: Optional[str] = None) -> None:
        """Reject this user's host application."""
        self.host_verification_status = HostVerificationStatus.REJECTED.value
        self.verified_at = None
        self.verified_by_id = admin_id
        self.verification_rejection_reason = reason
        logger.info(f"User {self.id} host verification rejected by {admin_id}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "is_admin": bool(self.is_admin),
            "host_verification_status": self.host_verification_status,
        }
