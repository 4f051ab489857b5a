"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the API and CLI layers can catch them uniformly and display user-friendly
messages.  Each class carries the HTTP status it maps to.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    http_status = 500


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    http_status = 400


class InvalidAmount(ValidationError):
    """A monetary amount was zero, negative or unparseable."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    http_status = 404


class PaymentNotFound(EntityNotFoundError):
    """No payment with the given id."""


class UnknownPayment(EntityNotFoundError):
    """The gateway referenced a charge this system never initialized."""


class ConflictError(DomainException):
    """The request conflicts with the current state of a record."""

    http_status = 409


class OrderNotPayable(ConflictError):
    """The order is not PENDING or already has a live payment."""


class InvalidTransition(DomainException):
    """A state machine rejected the requested move."""

    http_status = 400


class InvalidStatus(ValidationError):
    """The requested target status does not exist."""


class PayoutDestinationMissing(ValidationError):
    """The seller has no verified payout account on file."""


class ExternalGatewayError(DomainException):
    """A downstream gateway call failed."""

    http_status = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(DomainException):
    """A webhook signature did not match the request body."""

    http_status = 400
