"""Service helpers for runtime-editable platform configuration."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
import logging
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..repositories.factory import RepositoryFactory

logger = logging.getLogger(__name__)

# Keys an admin may override at runtime, with their typed fallbacks
PRICING_CONFIG_KEYS = (
    "commission_rate",
    "vat_rate",
    "screen_sharing_price",
    "translation_price",
    "recording_price",
    "transcription_price",
)


def default_pricing_config() -> Dict[str, Decimal]:
    return {key: Decimal(getattr(settings, key)) for key in PRICING_CONFIG_KEYS}


class ConfigService:
    """Business logic for reading and writing platform configuration."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = RepositoryFactory.create_platform_config_repository(db)

    def get_decimal(self, key: str, default: Decimal) -> Decimal:
        raw = self.repo.get_value(key)
        if raw is None:
            return default
        try:
            return Decimal(str(raw))
        except (InvalidOperation, ValueError):
            logger.warning("Ignoring non-numeric platform config %s=%r", key, raw)
            return default

    def get_pricing_config(self) -> Dict[str, Decimal]:
        defaults = default_pricing_config()
        return {key: self.get_decimal(key, default) for key, default in defaults.items()}

    def set_pricing_config(self, updates: Dict[str, Optional[Decimal]]) -> Dict[str, Decimal]:
        """
        Persist admin overrides and return the effective pricing config.

        Keys mapped to None keep their current value.

        Raises:
            KeyError: A key that is not runtime-editable
        """
        unknown = set(updates) - set(PRICING_CONFIG_KEYS)
        if unknown:
            raise KeyError(sorted(unknown)[0])

        now = datetime.now(timezone.utc)
        try:
            for key, value in updates.items():
                if value is not None:
                    self.repo.upsert(key=key, value=str(value), updated_at=now)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(
            "Platform pricing config updated: %s",
            {key: str(value) for key, value in updates.items() if value is not None},
        )
        return self.get_pricing_config()
