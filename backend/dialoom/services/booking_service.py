# backend/dialoom/services/booking_service.py
"""
Booking Service for the Dialoom booking API.

Handles the booking request pipeline and the booking lifecycle:
- Validating a booking request (host, eligibility, calendar, price)
- Creating bookings in ``pending`` state
- Confirming bookings once payment has been captured
- Cancelling and completing bookings
- Listing a user's bookings

Creation runs its checks in a fixed order and stops at the first failure:
host exists (404), host is verified (403), slot is free (409), price matches
the rate card (400). Nothing is written unless every check passes.
"""

from datetime import date, time
from decimal import Decimal
import logging
from typing import Any, Dict, Iterable, List, NoReturn, Optional, Sequence

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ..core.constants import CONFLICT_MESSAGE, INTERNAL_ERROR_MESSAGE
from ..core.enums import AddOnService, BookingRole, BookingStatus, HostVerificationStatus
from ..core.exceptions import (
    BookingConflictException,
    BusinessRuleException,
    ForbiddenException,
    HostNotVerifiedException,
    NotFoundException,
    PaymentNotCapturedException,
    RepositoryException,
    ServiceException,
    ValidationException,
)
from ..models.booking import Booking
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..repositories.user_repository import UserRepository
from .base import BaseService
from .conflict_checker import ConflictChecker
from .notification_service import NotificationService
from .pricing_service import PriceQuote, PricingService
from .stripe_service import StripeService

logger = logging.getLogger(__name__)

_DEADLOCK_MARKERS = ("deadlock detected", "could not serialize access", "database is locked")


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Collaborators are injectable so the pipeline can be exercised against
    fakes; by default they are built from the request's session.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[BookingRepository] = None,
        user_repository: Optional[UserRepository] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        pricing_service: Optional[PricingService] = None,
        notification_service: Optional[NotificationService] = None,
        stripe_service: Optional[StripeService] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db, self.repository)
        self.pricing_service = pricing_service or PricingService(db)
        self.notification_service = notification_service or NotificationService(db)
        self._stripe_service = stripe_service

    @property
    def stripe_service(self) -> StripeService:
        if self._stripe_service is None:
            self._stripe_service = StripeService()
        return self._stripe_service

    # ------------------------------------------------------------------
    # Creation pipeline
    # ------------------------------------------------------------------

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        guest_id: str,
        host_id: str,
        scheduled_date: date,
        start_time: time,
        duration: int,
        price: Decimal,
        services: Sequence[AddOnService] = (),
        notes: Optional[str] = None,
    ) -> Booking:
        """
        Validate a booking request and persist it as ``pending``.

        Args:
            guest_id: Authenticated user making the request
            host_id: Host being booked
            scheduled_date: Date the session starts on
            start_time: Local start time of the session
            duration: Session length in minutes
            price: Price the guest was shown
            services: Add-on services requested with the session
            notes: Optional note for the host

        Returns:
            Created booking instance

        Raises:
            ValidationException: Guest books themself, or price does not match
            NotFoundException: Host does not exist
            HostNotVerifiedException: Host is not verified
            BookingConflictException: Slot overlaps an existing booking
            ServiceException: Booking could not be stored
        """
        services = tuple(dict.fromkeys(services))
        self.log_operation(
            "create_booking",
            guest_id=guest_id,
            host_id=host_id,
            date=scheduled_date.isoformat(),
            start_time=start_time.strftime("%H:%M"),
            duration=duration,
        )

        if guest_id == host_id:
            raise ValidationException(
                "You cannot book a session with yourself", code="SELF_BOOKING"
            )

        # 1-2. Host must exist and be verified
        host = self._get_bookable_host(host_id)

        # 3. Slot must be free
        self._ensure_slot_free(host_id, scheduled_date, start_time, duration)

        # 4. Price must match the published rate card
        quote = self._validate_price(host_id, duration, price, services)

        # 5. Persist under the host lock
        booking = self._persist_booking(
            host_id=host_id,
            guest_id=guest_id,
            scheduled_date=scheduled_date,
            start_time=start_time,
            duration=duration,
            price=quote.total,
            currency=quote.currency,
            services=services,
            notes=notes,
        )

        self._handle_post_booking_tasks(booking, host)
        return booking

    def _get_bookable_host(self, host_id: str) -> User:
        host = self.user_repository.get_by_id(host_id)
        if host is None:
            prometheus_metrics.inc_booking_rejection("host_not_found")
            raise NotFoundException(
                "Host not found", code="HOST_NOT_FOUND", details={"host_id": host_id}
            )
        if host.host_verification_status != HostVerificationStatus.VERIFIED.value:
            prometheus_metrics.inc_booking_rejection("host_not_verified")
            self.logger.info(
                f"Rejected booking for host {host_id} with status {host.host_verification_status}"
            )
            raise HostNotVerifiedException(host_id)
        return host

    def _ensure_slot_free(
        self, host_id: str, scheduled_date: date, start_time: time, duration: int
    ) -> None:
        conflicts = self.conflict_checker.check_booking_conflicts(
            host_id, scheduled_date, start_time, duration
        )
        if conflicts:
            prometheus_metrics.inc_booking_rejection("conflict")
            raise BookingConflictException(
                message=CONFLICT_MESSAGE,
                details=self._conflict_details(host_id, scheduled_date, start_time, duration),
            )

    def _validate_price(
        self,
        host_id: str,
        duration: int,
        price: Decimal,
        services: Iterable[AddOnService],
    ) -> PriceQuote:
        try:
            return self.pricing_service.validate_price(host_id, duration, price, services)
        except ValidationException:
            prometheus_metrics.inc_booking_rejection("price_mismatch")
            raise

    @staticmethod
    def _conflict_details(
        host_id: str, scheduled_date: date, start_time: time, duration: int
    ) -> Dict[str, Any]:
        # Existing bookings are not echoed back; they belong to other guests
        return {
            "host_id": host_id,
            "scheduled_date": scheduled_date.isoformat(),
            "start_time": start_time.strftime("%H:%M"),
            "duration": duration,
        }

    def _persist_booking(
        self,
        *,
        host_id: str,
        guest_id: str,
        scheduled_date: date,
        start_time: time,
        duration: int,
        price: Decimal,
        currency: str,
        services: Sequence[AddOnService],
        notes: Optional[str],
    ) -> Booking:
        """
        Insert the booking after re-checking the slot under a lock on the host row.

        Two requests racing for the same host serialize on that lock, so the
        second one sees the first booking when it re-checks.
        """
        try:
            with self.transaction():
                self.user_repository.get_by_id(host_id, for_update=True)
                if self.conflict_checker.has_conflict(
                    host_id, scheduled_date, start_time, duration
                ):
                    prometheus_metrics.inc_booking_rejection("conflict")
                    raise BookingConflictException(
                        message=CONFLICT_MESSAGE,
                        details=self._conflict_details(
                            host_id, scheduled_date, start_time, duration
                        ),
                    )
                booking = self.repository.create(
                    host_id=host_id,
                    guest_id=guest_id,
                    scheduled_date=scheduled_date,
                    start_time=start_time,
                    duration=duration,
                    price=price,
                    currency=currency,
                    status=BookingStatus.PENDING.value,
                    notes=notes,
                    **{service.value: True for service in services},
                )
        except (IntegrityError, OperationalError) as exc:
            self._raise_for_persistence_error(exc, host_id, scheduled_date, start_time, duration)
        except ServiceException as exc:
            self._raise_for_persistence_error(
                exc.__cause__ or exc, host_id, scheduled_date, start_time, duration
            )
        except RepositoryException as exc:
            self._raise_for_persistence_error(exc, host_id, scheduled_date, start_time, duration)

        self.logger.info(f"Created booking {booking.id} for host {host_id} (pending)")
        return booking

    def _raise_for_persistence_error(
        self,
        exc: BaseException,
        host_id: str,
        scheduled_date: date,
        start_time: time,
        duration: int,
    ) -> NoReturn:
        if isinstance(exc, OperationalError) and any(
            marker in str(exc).lower() for marker in _DEADLOCK_MARKERS
        ):
            raise BookingConflictException(
                message=CONFLICT_MESSAGE,
                details=self._conflict_details(host_id, scheduled_date, start_time, duration),
            ) from exc
        self.logger.error(
            f"Failed to persist booking for host {host_id}: {type(exc).__name__}: {exc}",
            exc_info=exc,
        )
        raise ServiceException(INTERNAL_ERROR_MESSAGE, code="BOOKING_PERSISTENCE_FAILED") from exc

    def _handle_post_booking_tasks(self, booking: Booking, host: User) -> None:
        guest = self.user_repository.get_by_id(booking.guest_id)
        if guest is None:
            self.logger.warning(f"Guest {booking.guest_id} missing; skipping booking emails")
            return
        try:
            self.notification_service.send_booking_created(booking, host, guest)
        except Exception as e:
            self.logger.error(f"Failed to send notification for booking {booking.id}: {str(e)}")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @BaseService.measure_operation("check_availability")
    def check_availability(
        self, host_id: str, scheduled_date: date, start_time: time, duration: int
    ) -> Dict[str, Any]:
        """Report whether a slot could be booked right now, without booking it."""
        host = self.user_repository.get_by_id(host_id)
        if host is None:
            raise NotFoundException(
                "Host not found", code="HOST_NOT_FOUND", details={"host_id": host_id}
            )
        if not host.is_verified_host:
            return {"available": False, "reason": "host_not_verified", "conflicts": []}

        conflicts = self.conflict_checker.check_booking_conflicts(
            host_id, scheduled_date, start_time, duration
        )
        if conflicts:
            return {
                "available": False,
                "reason": "conflict",
                # Only timing is exposed, never the other booking's id
                "conflicts": [
                    {key: c[key] for key in ("scheduled_date", "start_time", "end_time")}
                    for c in conflicts
                ],
            }
        return {"available": True, "reason": None, "conflicts": []}

    def get_booking_for_user(self, booking_id: str, user_id: str) -> Booking:
        booking = self._get_booking_or_404(booking_id)
        if not booking.is_participant(user_id):
            raise ForbiddenException("You do not have access to this booking")
        return booking

    @BaseService.measure_operation("list_bookings_for_user")
    def list_bookings_for_user(
        self,
        user_id: str,
        role: Optional[BookingRole] = None,
        status: Optional[BookingStatus] = None,
    ) -> List[Booking]:
        return self.repository.list_for_user(
            user_id, role=role, status=status.value if status else None
        )

    def _get_booking_or_404(self, booking_id: str) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        return booking

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(
        self, booking_id: str, user_id: str, reason: Optional[str] = None
    ) -> Booking:
        """
        Cancel a pending or confirmed booking.

        Raises:
            NotFoundException: Booking does not exist
            ForbiddenException: User is neither host nor guest
            BusinessRuleException: Booking is already cancelled or completed
        """
        self.log_operation("cancel_booking", booking_id=booking_id, user_id=user_id)
        booking = self._get_booking_or_404(booking_id)
        if not booking.is_participant(user_id):
            raise ForbiddenException("You don't have permission to cancel this booking")
        if not booking.is_cancellable:
            raise BusinessRuleException(
                f"Booking cannot be cancelled - current status: {booking.status}",
                code="BOOKING_NOT_CANCELLABLE",
            )

        with self.transaction():
            booking.cancel(user_id, reason)

        self._notify_cancellation(booking, user_id)
        return booking

    def _notify_cancellation(self, booking: Booking, cancelled_by_id: str) -> None:
        host = self.user_repository.get_by_id(booking.host_id)
        guest = self.user_repository.get_by_id(booking.guest_id)
        if host is None or guest is None:
            return
        cancelled_by = host if cancelled_by_id == host.id else guest
        try:
            self.notification_service.send_booking_cancelled(booking, host, guest, cancelled_by)
        except Exception as e:
            self.logger.error(f"Failed to send cancellation for booking {booking.id}: {str(e)}")

    @BaseService.measure_operation("confirm_booking_payment")
    def confirm_booking_payment(
        self, booking_id: str, user_id: str, payment_intent_id: str
    ) -> Booking:
        """
        Confirm a pending booking once its payment intent has succeeded.

        Raises:
            NotFoundException: Booking does not exist
            ForbiddenException: User is not the guest
            BusinessRuleException: Booking is not pending, or payment not captured
        """
        self.log_operation("confirm_booking_payment", booking_id=booking_id, user_id=user_id)
        booking = self._get_booking_or_404(booking_id)
        if booking.guest_id != user_id:
            raise ForbiddenException("Only the guest can confirm payment for this booking")
        if booking.status != BookingStatus.PENDING.value:
            raise BusinessRuleException(
                f"Booking cannot be confirmed - current status: {booking.status}",
                code="BOOKING_NOT_PENDING",
            )
        if not self.stripe_service.is_payment_captured(payment_intent_id):
            raise PaymentNotCapturedException(payment_intent_id)

        with self.transaction():
            booking.confirm(payment_intent_id)

        host = self.user_repository.get_by_id(booking.host_id)
        guest = self.user_repository.get_by_id(booking.guest_id)
        if host is not None and guest is not None:
            try:
                self.notification_service.send_booking_confirmed(booking, host, guest)
            except Exception as e:
                self.logger.error(
                    f"Failed to send confirmation for booking {booking.id}: {str(e)}"
                )
        return booking

    @BaseService.measure_operation("complete_booking")
    def complete_booking(self, booking_id: str, user_id: str) -> Booking:
        """
        Mark a confirmed booking as completed. Only the host may do this.

        Raises:
            NotFoundException: Booking does not exist
            ForbiddenException: User is not the host
            BusinessRuleException: Booking is not confirmed
        """
        self.log_operation("complete_booking", booking_id=booking_id, user_id=user_id)
        booking = self._get_booking_or_404(booking_id)
        if booking.host_id != user_id:
            raise ForbiddenException("Only the host can mark this booking as completed")
        if booking.status != BookingStatus.CONFIRMED.value:
            raise BusinessRuleException(
                f"Only confirmed bookings can be completed - current status: {booking.status}",
                code="BOOKING_NOT_CONFIRMED",
            )

        with self.transaction():
            booking.complete()
        return booking
