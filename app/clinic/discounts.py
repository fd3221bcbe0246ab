"""
Price adjustments for treatment plan items.

A discount is a small value object that knows how to reduce one item's
unit price. TreatmentPlanService.apply_discount walks a plan's items and
hands each one to the discount, so new kinds of discount only need an
apply_to() implementation.

Discount Types:
    PercentageDiscount: Reduce price by a percentage (0 to 100)
    FixedDiscount: Reduce price by a fixed amount per unit

Usage:
    from clinic.discounts import PercentageDiscount

    discount = PercentageDiscount(Decimal("10"))
    discount.apply_to(item)      # item.price_snapshot 200.00 -> 180.00
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Protocol

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from clinic.models import TreatmentItem

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


class Discount(Protocol):
    """Anything that can lower a treatment item's unit price."""

    def apply_to(self, item: TreatmentItem) -> None: ...

    def describe(self) -> str: ...


def _money(value: Decimal) -> Decimal:
    return max(value, ZERO).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PercentageDiscount:
    """Take a percentage off each unit price."""

    percentage: Decimal

    def __post_init__(self):
        if self.percentage < 0 or self.percentage > HUNDRED:
            raise ValidationError(
                "Percentage must be between 0 and 100.",
                error_code="INVALID_DISCOUNT",
                details={"percentage": str(self.percentage)},
            )

    def apply_to(self, item: TreatmentItem) -> None:
        reduction = item.price_snapshot * self.percentage / HUNDRED
        item.price_snapshot = _money(item.price_snapshot - reduction)

    def describe(self) -> str:
        return f"{self.percentage}%"


@dataclass(frozen=True)
class FixedDiscount:
    """Take a fixed amount off each unit price, never going below zero."""

    amount: Decimal

    def __post_init__(self):
        if self.amount < 0:
            raise ValidationError(
                "Discount amount cannot be negative.",
                error_code="INVALID_DISCOUNT",
                details={"amount": str(self.amount)},
            )

    def apply_to(self, item: TreatmentItem) -> None:
        item.price_snapshot = _money(item.price_snapshot - self.amount)

    def describe(self) -> str:
        return f"{self.amount} off"


def build_discount(kind: str, value: Decimal) -> Discount:
    """
    Construct a discount from an API payload.

    Args:
        kind: "percentage" or "fixed"
        value: Percentage (0 to 100) or amount per unit

    Raises:
        ValidationError: Unknown kind or out-of-range value
    """
    if kind == "percentage":
        return PercentageDiscount(value)
    if kind == "fixed":
        return FixedDiscount(value)
    raise ValidationError(
        f"Unknown discount type '{kind}'.",
        error_code="INVALID_DISCOUNT",
        details={"kind": kind},
    )
