"""
Data types for payment ledger operations.

This module defines dataclasses used to move ledger data between the
service layer and its callers without handing out model instances.

Types:
    AddPaymentParams: Input for PaymentService.add_payment
    PaymentRecord: A ledger entry with display names resolved
    PatientPaymentSummary: Cost, paid and remaining balance for a patient
    ReconciliationResult: Outcome of recalculating one patient
    FinancialReport: Figures for the reports dashboard

Usage:
    from payments.types import AddPaymentParams

    params = AddPaymentParams(
        patient_id=patient.id,
        amount=Decimal("250.00"),
        payment_date=timezone.localdate(),
        appointment_id=appointment.id,
    )
    record = payment_service.add_payment(params, actor_id=request.user.id)
    print(record.patient_name, record.amount)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from authentication.services import UNKNOWN_ACTOR

if TYPE_CHECKING:
    from payments.models import PaymentTransaction


@dataclass
class AddPaymentParams:
    """
    Parameters for recording a payment.

    Values are normalized but not validated here; validation happens in
    payments.validators so that every problem is reported as
    InvalidPayment before anything is written.

    Required Attributes:
        patient_id: Patient who paid
        amount: Amount received (Decimal; ints and numeric strings are converted)
        payment_date: Day the money was received

    Optional Attributes:
        appointment_id: Appointment the payment is for; None for a
            patient-level credit
        notes: Free text
    """

    patient_id: uuid.UUID | None
    amount: Decimal | None
    payment_date: date | None
    appointment_id: uuid.UUID | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        """Normalize amount and notes."""
        if self.amount is not None and not isinstance(self.amount, Decimal):
            if isinstance(self.amount, float):
                raise TypeError("amount must be a Decimal, int or str, not float")
            try:
                self.amount = Decimal(str(self.amount))
            except InvalidOperation:
                self.amount = None
        self.notes = (self.notes or "").strip()


@dataclass
class PaymentRecord:
    """
    A ledger entry as presented to callers.

    Includes the patient's name and the recording user's display name so
    callers never need to look them up.
    """

    id: uuid.UUID
    patient_id: uuid.UUID
    patient_name: str
    appointment_id: uuid.UUID | None
    amount: Decimal
    payment_date: date
    notes: str
    created_by_id: int | None
    created_by_name: str
    created_at: datetime

    @classmethod
    def from_transaction(cls, payment: PaymentTransaction) -> PaymentRecord:
        """
        Build a record from a PaymentTransaction.

        Expects patient and created_by to be loaded (select_related) to
        avoid a query per row.
        """
        creator = payment.created_by
        return cls(
            id=payment.id,
            patient_id=payment.patient_id,
            patient_name=payment.patient.full_name,
            appointment_id=payment.appointment_id,
            amount=payment.amount,
            payment_date=payment.payment_date,
            notes=payment.notes,
            created_by_id=payment.created_by_id,
            created_by_name=creator.get_full_name() if creator else UNKNOWN_ACTOR,
            created_at=payment.created_at,
        )


@dataclass
class PatientPaymentSummary:
    """
    A patient's financial position.

    remaining_balance = total_cost - total_paid. It is negative when the
    patient has paid more than their treatment plans cost.
    """

    patient_id: uuid.UUID
    patient_name: str
    total_cost: Decimal
    total_paid: Decimal
    payments: list[PaymentRecord] = field(default_factory=list)
    remaining_balance: Decimal = field(init=False)

    def __post_init__(self) -> None:
        self.remaining_balance = self.total_cost - self.total_paid


@dataclass
class ReconciliationResult:
    """Outcome of recalculating paid amounts for one patient."""

    patient_id: uuid.UUID
    appointments_checked: int
    appointments_changed: int


@dataclass
class FinancialReport:
    """Figures shown on the financial reports screen."""

    year: int
    total_revenue: Decimal
    revenue_this_month: Decimal
    outstanding_total: Decimal
    outstanding_patient_count: int
    monthly_revenue: dict[str, Decimal]
    recent_payments: list[PaymentRecord]
