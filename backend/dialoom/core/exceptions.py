# backend/dialoom/core/exceptions.py
"""
Domain-specific exceptions for the Dialoom booking API.

Services raise these; the route layer converts them to HTTP responses
through ``to_http_exception``. Each class maps to exactly one status code.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from .constants import INTERNAL_ERROR_MESSAGE

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainException):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.code == other.code
            and self.details == other.details
        )

    __hash__ = Exception.__hash__


class ValidationException(DomainException):
    """Raised when request arguments fail business validation (invalid argument)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails for internal reasons."""

    def to_http_exception(self) -> HTTPException:
        # Internal causes stay in the server logs
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": INTERNAL_ERROR_MESSAGE,
                "code": self.code,
                "details": {},
            },
        )


# Specific business exceptions


class HostNotVerifiedException(ForbiddenException):
    """Raised when a booking targets a host that has not been verified."""

    def __init__(self, host_id: str):
        super().__init__(
            message="Host is not verified and cannot accept bookings",
            code="HOST_NOT_VERIFIED",
            details={"host_id": host_id},
        )


class BookingConflictException(ConflictException):
    """Raised when a booking conflicts with existing bookings."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class PriceMismatchException(ValidationException):
    """Raised when the supplied price does not match the host's rate card."""

    def __init__(self, supplied: str, expected: str, tolerance: str):
        super().__init__(
            message="Price does not match the host's published rate",
            code="PRICE_MISMATCH",
            details={"supplied": supplied, "expected": expected, "tolerance": tolerance},
        )


class PaymentNotCapturedException(BusinessRuleException):
    """Raised when a booking is confirmed before its payment succeeded."""

    def __init__(self, payment_intent_id: str):
        super().__init__(
            message="Payment has not been completed",
            code="PAYMENT_NOT_CAPTURED",
            details={"payment_intent_id": payment_intent_id},
        )


class AvailabilityOverlapException(ConflictException):
    """Raised when an availability window overlaps one the host already published."""

    def __init__(self, when: str, new_range: str, conflicting_range: str):
        super().__init__(
            message=f"Overlapping window on {when}: {new_range} conflicts with {conflicting_range}",
            code="AVAILABILITY_OVERLAP",
            details={
                "when": when,
                "new_window": new_range,
                "conflicting_window": conflicting_range,
            },
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
