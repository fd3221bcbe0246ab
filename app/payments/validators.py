"""
Validation for payment input.

validate_payment() checks everything that can be checked without touching
the database and reports all problems at once as a single InvalidPayment.
Existence of the patient and appointment is checked later, inside the
transaction, by PaymentService.

Limits come from settings:
    PAYMENT_MAX_AMOUNT: Amounts must be strictly below this
    PAYMENT_FUTURE_DATE_TOLERANCE_DAYS: How far ahead payment_date may be
    PAYMENT_NOTES_MAX_LENGTH: Maximum notes length
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from django.conf import settings
from django.utils import timezone

from payments.exceptions import InvalidPayment

if TYPE_CHECKING:
    from payments.types import AddPaymentParams

CENT = Decimal("0.01")


def validate_payment(params: AddPaymentParams) -> None:
    """
    Validate payment input.

    Raises:
        InvalidPayment: With per-field messages in details
    """
    errors: dict[str, list[str]] = {}

    if not params.patient_id:
        errors.setdefault("patient_id", []).append("Patient is required.")

    amount_errors = _amount_errors(params.amount)
    if amount_errors:
        errors["amount"] = amount_errors

    if params.payment_date is None:
        errors.setdefault("payment_date", []).append("Payment date is required.")
    else:
        latest = timezone.localdate() + timedelta(
            days=settings.PAYMENT_FUTURE_DATE_TOLERANCE_DAYS
        )
        if params.payment_date > latest:
            errors.setdefault("payment_date", []).append(
                "Payment date cannot be in the future."
            )

    max_notes = settings.PAYMENT_NOTES_MAX_LENGTH
    if len(params.notes) > max_notes:
        errors.setdefault("notes", []).append(
            f"Notes cannot exceed {max_notes} characters."
        )

    if errors:
        raise InvalidPayment.from_errors(errors)


def _amount_errors(amount: Decimal | None) -> list[str]:
    if amount is None or not amount.is_finite():
        return ["Payment amount is required."]
    if amount <= 0:
        return ["Payment amount must be greater than zero."]

    max_amount = Decimal(settings.PAYMENT_MAX_AMOUNT)
    if amount >= max_amount:
        return [f"Payment amount must be less than {max_amount:,}."]
    if amount != amount.quantize(CENT):
        return ["Payment amount cannot have more than 2 decimal places."]
    return []
