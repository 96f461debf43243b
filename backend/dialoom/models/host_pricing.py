# backend/dialoom/models/host_pricing.py
"""Host rate card entries: one price per session duration."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.constants import DEFAULT_CURRENCY
from ..core.enums import AddOnService
from ..core.ulid_helper import generate_ulid
from ..database import Base


class HostPricing(Base):
    """
    A published price for a session of ``duration`` minutes.

    The ``includes_*`` flags say which add-on services the host offers with
    sessions of this length.
    """

    __tablename__ = "host_pricing"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    host_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    duration = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    is_active = Column(Boolean, nullable=False, default=True)
    is_custom = Column(Boolean, nullable=False, default=False)

    includes_screen_sharing = Column(Boolean, nullable=False, default=False)
    includes_translation = Column(Boolean, nullable=False, default=False)
    includes_recording = Column(Boolean, nullable=False, default=False)
    includes_transcription = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    host = relationship("User", backref="pricing")

    __table_args__ = (
        UniqueConstraint("host_id", "duration", name="uq_host_pricing_duration"),
        CheckConstraint("duration > 0", name="check_pricing_duration_positive"),
        CheckConstraint("price >= 0", name="check_pricing_price_non_negative"),
    )

    def offers(self, service: AddOnService) -> bool:
        return bool(getattr(self, service.pricing_flag))

    def __repr__(self) -> str:
        return f"<HostPricing {self.host_id}: {self.duration}min={self.price} {self.currency}>"
