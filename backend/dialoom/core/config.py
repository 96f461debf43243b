# backend/dialoom/core/config.py
from decimal import Decimal
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    ADDON_PRICE_DEFAULTS,
    DEFAULT_COMMISSION_RATE,
    DEFAULT_CURRENCY,
    DEFAULT_PRICE_TOLERANCE,
    DEFAULT_VAT_RATE,
)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "environment"),
    )

    # Database
    database_url: str = Field(
        default="sqlite+pysqlite:///./dialoom.db",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
        description="SQLAlchemy database URL",
    )
    test_database_url: str = Field(
        default="sqlite+pysqlite:///:memory:",
        validation_alias=AliasChoices("TEST_DATABASE_URL", "test_database_url"),
    )
    database_echo: bool = False

    # Supabase-issued session tokens
    supabase_jwt_secret: SecretStr = Field(
        default=SecretStr("dialoom-dev-jwt-secret-change-me"),
        validation_alias=AliasChoices("SUPABASE_JWT_SECRET", "supabase_jwt_secret"),
        description="HS256 secret used to verify Supabase access tokens",
    )
    supabase_jwt_audience: Optional[str] = Field(
        default="authenticated",
        validation_alias=AliasChoices("SUPABASE_JWT_AUDIENCE", "supabase_jwt_audience"),
    )
    jwt_algorithm: str = "HS256"

    # Payments
    stripe_secret_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("STRIPE_SECRET_KEY", "stripe_secret_key"),
    )

    # Email
    email_provider: Literal["console", "resend"] = Field(
        default="console",
        validation_alias=AliasChoices("EMAIL_PROVIDER", "email_provider"),
    )
    resend_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("RESEND_API_KEY", "resend_api_key"),
    )
    from_email: str = Field(
        default="Dialoom <bookings@dialoom.com>",
        validation_alias=AliasChoices("FROM_EMAIL", "from_email"),
    )

    # Pricing policy
    default_currency: str = DEFAULT_CURRENCY
    price_tolerance: Decimal = Field(
        default=DEFAULT_PRICE_TOLERANCE,
        ge=0,
        validation_alias=AliasChoices("PRICE_TOLERANCE", "price_tolerance"),
        description="Maximum absolute deviation between supplied and expected price",
    )
    commission_rate: Decimal = Field(default=DEFAULT_COMMISSION_RATE, ge=0, le=1)
    vat_rate: Decimal = Field(default=DEFAULT_VAT_RATE, ge=0, le=1)
    screen_sharing_price: Decimal = ADDON_PRICE_DEFAULTS["screen_sharing_price"]
    translation_price: Decimal = ADDON_PRICE_DEFAULTS["translation_price"]
    recording_price: Decimal = ADDON_PRICE_DEFAULTS["recording_price"]
    transcription_price: Decimal = ADDON_PRICE_DEFAULTS["transcription_price"]

    # Monitoring
    slow_operation_threshold_seconds: float = 1.0

    # CORS
    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("default_currency")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_testing(self) -> bool:
        return self.environment == "test" or is_running_tests()

    @property
    def stripe_configured(self) -> bool:
        return bool(self.stripe_secret_key and self.stripe_secret_key.get_secret_value())

    def get_database_url(self) -> str:
        """Get the appropriate database URL based on context."""
        if self.is_testing:
            return self.test_database_url
        return self.database_url


settings = Settings()
