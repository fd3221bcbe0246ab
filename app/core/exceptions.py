"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the API
- Machine-readable error codes for client handling
- Detailed error information for the operator

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures
    ├── NotFoundError - Resource not found
    ├── ConflictError - State conflicts (duplicates, protected rows)
    └── StorageError - The unit of work could not be committed

Usage:
    from core.exceptions import ValidationError, NotFoundError

    # Raise with message only
    raise ValidationError("Payment amount must be greater than zero.")

    # Raise with error code and field details
    raise ValidationError(
        "Validation failed",
        error_code="INVALID_PAYMENT",
        details={"amount": ["Payment amount must be greater than zero."]},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
    core.exception_handlers maps these onto HTTP responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, identifiers, etc.)

    Example:
        try:
            PaymentService.delete_payment(payment_id, actor_id=user.id)
        except NotFoundError as e:
            logger.warning(f"Payment not found: {e.error_code}")
            return Response(e.to_dict(), status=404)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Patient not found.",
                "error_code": "PATIENT_NOT_FOUND",
                "details": {"patient_id": "8f0c..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Missing required fields
    - Out-of-range values (non-positive amounts, future dates)
    - Business rule violations

    Always raised before any mutation, so no side effects have occurred.

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Use for single-resource lookups where existence is expected
    (patient, appointment, payment). List queries return empty results.
    """

    default_error_code: str = "NOT_FOUND"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Deleting rows that are still referenced (e.g. appointments with payments)
    - Moving a paid appointment to another patient
    - Duplicate entries

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"


class StorageError(BaseApplicationError):
    """
    Raised when the underlying unit of work fails to commit.

    Use for:
    - Constraint violations detected by the database
    - Connectivity loss mid-transaction
    - Conflicting concurrent transactions (serialization failures)

    By the time this is raised the transaction has been rolled back in
    full; callers never observe a partially applied operation.

    Example:
        try:
            with transaction.atomic():
                ...
        except DatabaseError as e:
            raise StorageError(
                "Could not record payment",
                details={"original_error": str(e)},
            ) from e
    """

    default_error_code: str = "STORAGE_ERROR"
