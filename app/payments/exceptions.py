"""
Payment ledger exceptions.

Exception Hierarchy:
    ValidationError (core)
    └── InvalidPayment - Input rejected before any mutation

    NotFoundError (core)
    ├── PatientNotFound - Re-exported from clinic.exceptions
    ├── AppointmentNotFound - Re-exported from clinic.exceptions
    └── PaymentNotFound - Ledger entry lookup failures

    StorageError (core)
    └── PaymentStorageError - The unit of work could not be committed

Every exception raised by PaymentService leaves the database exactly as
it was before the call.

Usage:
    from payments.exceptions import InvalidPayment, PaymentNotFound

    try:
        payment_service.delete_payment(payment_id, actor_id=user.id)
    except PaymentNotFound as e:
        return Response(e.to_dict(), status=404)
"""

from __future__ import annotations

from clinic.exceptions import AppointmentNotFound, PatientNotFound
from core.exceptions import NotFoundError, StorageError, ValidationError


class InvalidPayment(ValidationError):
    """
    Raised when payment input fails validation.

    details maps field names to lists of messages, the same shape DRF
    uses for serializer errors.

    Example:
        raise InvalidPayment(
            "Payment amount must be greater than zero.",
            details={"amount": ["Payment amount must be greater than zero."]},
        )
    """

    default_error_code: str = "INVALID_PAYMENT"

    @classmethod
    def from_errors(cls, errors: dict[str, list[str]]) -> InvalidPayment:
        """Build one exception from collected per-field errors."""
        first_message = next(iter(errors.values()))[0]
        return cls(first_message, details=errors)


class PaymentNotFound(NotFoundError):
    """Raised when a payment id does not resolve to a ledger entry."""

    default_error_code: str = "PAYMENT_NOT_FOUND"


class PaymentStorageError(StorageError):
    """
    Raised when the database rejects or loses the unit of work.

    The transaction has already been rolled back when this is raised.
    The original database error is chained as __cause__.
    """

    default_error_code: str = "PAYMENT_STORAGE_ERROR"


__all__ = [
    "InvalidPayment",
    "PatientNotFound",
    "AppointmentNotFound",
    "PaymentNotFound",
    "PaymentStorageError",
]
