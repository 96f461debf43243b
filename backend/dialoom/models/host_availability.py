# backend/dialoom/models/host_availability.py
"""Windows of time in which a host accepts sessions."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Time,
)
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class HostAvailability(Base):
    """
    Either a one-off window on ``date`` or a weekly window on ``day_of_week``.

    ``day_of_week`` counts from Sunday (0) to Saturday (6).
    """

    __tablename__ = "host_availability"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    host_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=True)
    day_of_week = Column(Integer, nullable=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)",
            name="check_day_of_week_range",
        ),
        CheckConstraint(
            "(date IS NOT NULL) OR (day_of_week IS NOT NULL)",
            name="check_date_or_day_of_week",
        ),
        CheckConstraint("start_time < end_time", name="check_availability_time_order"),
    )

    def __repr__(self) -> str:
        when = self.date.isoformat() if self.date else f"dow={self.day_of_week}"
        return f"<HostAvailability {self.host_id}: {when} {self.start_time}-{self.end_time}>"
