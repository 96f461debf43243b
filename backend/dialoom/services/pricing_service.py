"""Rate card lookups and price calculations for bookings."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import CENTS
from ..core.enums import AddOnService
from ..core.exceptions import PriceMismatchException, ValidationException
from ..models.host_pricing import HostPricing
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.host_pricing_repository import HostPricingRepository
from .base import BaseService
from .config_service import ConfigService
from .host_verification_service import require_host_account


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceQuote:
    """Expected price of a session as published by the host."""

    host_id: str
    duration: int
    base_price: Decimal
    currency: str
    addons: Dict[str, Decimal] = field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        return to_cents(self.base_price + sum(self.addons.values(), Decimal("0")))


@dataclass(frozen=True)
class PriceBreakdown:
    """Split of a paid amount between platform and host."""

    amount: Decimal
    commission: Decimal
    vat: Decimal
    host_amount: Decimal


class PricingService(BaseService):
    """
    Compute expected prices from host rate cards.

    A requested session is priced at the host's active rate for exactly that
    duration, plus the platform price of every selected add-on the rate
    offers. A supplied price is accepted when it is within
    ``settings.price_tolerance`` of that figure.
    """

    def __init__(
        self,
        db: Session,
        pricing_repository: Optional[HostPricingRepository] = None,
        config_service: Optional[ConfigService] = None,
    ) -> None:
        super().__init__(db)
        self.pricing_repository = (
            pricing_repository or RepositoryFactory.create_host_pricing_repository(db)
        )
        self.config_service = config_service or ConfigService(db)

    def get_addon_prices(self) -> Dict[AddOnService, Decimal]:
        config = self.config_service.get_pricing_config()
        return {service: to_cents(config[service.price_key]) for service in AddOnService}

    def get_rate_card(self, host_id: str) -> List[HostPricing]:
        return self.pricing_repository.list_for_host(host_id)

    @BaseService.measure_operation("replace_rate_card")
    def replace_rate_card(
        self, host: User, entries: Iterable[Dict[str, Any]]
    ) -> List[HostPricing]:
        """Replace the host's rate card. Durations must be unique."""
        require_host_account(host)
        host_id = host.id
        rows = list(entries)
        durations = [row["duration"] for row in rows]
        if len(durations) != len(set(durations)):
            raise ValidationException(
                "Each session duration may only be priced once",
                code="DUPLICATE_DURATION",
                details={"durations": durations},
            )
        self.log_operation("replace_rate_card", host_id=host_id, entries=len(rows))
        with self.transaction():
            return self.pricing_repository.replace_for_host(host_id, rows)

    def get_host_services(self, host_id: str) -> Dict[str, Dict[str, Any]]:
        """Add-ons and their prices; a service is offered if any active rate includes it."""
        rates = self.pricing_repository.list_for_host(host_id)
        prices = self.get_addon_prices()
        return {
            service.value: {
                "offered": any(rate.offers(service) for rate in rates),
                "price": prices[service],
            }
            for service in AddOnService
        }

    @BaseService.measure_operation("quote")
    def quote(
        self, host_id: str, duration: int, services: Iterable[AddOnService] = ()
    ) -> PriceQuote:
        """
        Price a session from the host's published rate card.

        Raises:
            ValidationException: No active rate for the duration, or an add-on
                the rate does not offer
        """
        rate = self.pricing_repository.get_active_for_duration(host_id, duration)
        if rate is None:
            raise ValidationException(
                f"Host has no published rate for a {duration} minute session",
                code="NO_PUBLISHED_RATE",
                details={"host_id": host_id, "duration": duration},
            )

        addon_prices = self.get_addon_prices()
        addons: Dict[str, Decimal] = {}
        for service in services:
            if not rate.offers(service):
                raise ValidationException(
                    f"Host does not offer {service.value.replace('_', ' ')}",
                    code="ADDON_NOT_OFFERED",
                    details={"service": service.value, "duration": duration},
                )
            addons[service.value] = addon_prices[service]

        return PriceQuote(
            host_id=host_id,
            duration=duration,
            base_price=to_cents(Decimal(rate.price)),
            currency=rate.currency or settings.default_currency,
            addons=addons,
        )

    def validate_price(
        self,
        host_id: str,
        duration: int,
        supplied_price: Decimal,
        services: Iterable[AddOnService] = (),
    ) -> PriceQuote:
        """Return the quote when ``supplied_price`` matches it within tolerance."""
        quote = self.quote(host_id, duration, services)
        tolerance = Decimal(settings.price_tolerance)
        if abs(Decimal(supplied_price) - quote.total) > tolerance:
            self.logger.info(
                "Price mismatch for host %s: supplied=%s expected=%s",
                host_id,
                supplied_price,
                quote.total,
            )
            raise PriceMismatchException(
                supplied=str(to_cents(Decimal(supplied_price))),
                expected=str(quote.total),
                tolerance=str(tolerance),
            )
        return quote

    def calculate_breakdown(self, amount: Decimal) -> PriceBreakdown:
        """Commission is taken on the full amount and VAT on the commission."""
        config = self.config_service.get_pricing_config()
        amount = to_cents(Decimal(amount))
        commission = to_cents(amount * config["commission_rate"])
        vat = to_cents(commission * config["vat_rate"])
        return PriceBreakdown(
            amount=amount,
            commission=commission,
            vat=vat,
            host_amount=to_cents(amount - commission - vat),
        )

    def quote_with_breakdown(
        self, host_id: str, duration: int, services: Iterable[AddOnService] = ()
    ) -> Tuple[PriceQuote, PriceBreakdown]:
        """Quote a session and split its total between platform and host."""
        quote = self.quote(host_id, duration, services)
        return quote, self.calculate_breakdown(quote.total)
