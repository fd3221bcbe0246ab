"""
Payment ledger models.

PaymentTransaction is the authoritative record of money received from a
patient. Everything else that shows "paid" (Appointment.paid_amount,
patient balances, revenue reports) is derived from these rows.

Lifecycle:
    Rows are created by PaymentService.add_payment and removed by
    PaymentService.delete_payment. They are never updated in place;
    a correction is a delete followed by a new add.

Related files:
    - services.py: The only writer of ledger rows
    - reconciler.py: Recomputes Appointment.paid_amount from these rows
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.model_mixins import UUIDPrimaryKeyMixin


class PaymentTransaction(UUIDPrimaryKeyMixin, models.Model):
    """
    A single payment received from a patient.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        patient: Patient who paid; required and never changes
        appointment: Optional appointment the payment is for. Without it the
            payment is a patient-level credit: it counts toward the patient's
            total paid but toward no single appointment.
        amount: Positive amount with 2 decimal places
        payment_date: Day the money was actually received
        notes: Optional free text
        created_by: User who recorded the payment (kept as NULL if the
            account is later deleted)
        created_at: Set once when the row is inserted
        sequence: Per-patient insertion counter, used to order payments
            that share a payment_date

    Constraints:
        - amount must be positive
        - (patient, sequence) is unique
    """

    patient = models.ForeignKey(
        "clinic.Patient",
        on_delete=models.PROTECT,
        related_name="payments",
        help_text="Patient who made the payment",
    )
    appointment = models.ForeignKey(
        "clinic.Appointment",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
        help_text="Appointment this payment is for (empty for patient-level credit)",
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Amount received",
    )
    payment_date = models.DateField(
        db_index=True,
        help_text="Date the payment was made",
    )
    notes = models.CharField(
        max_length=500,
        blank=True,
        help_text="Optional notes",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_payments",
        help_text="User who recorded the payment",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the payment was recorded",
    )
    sequence = models.PositiveIntegerField(
        editable=False,
        help_text="Per-patient insertion order",
    )

    class Meta:
        ordering = ["-payment_date", "sequence"]
        indexes = [
            models.Index(fields=["patient", "payment_date"], name="payment_patient_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="payment_amount_positive",
            ),
            models.UniqueConstraint(
                fields=["patient", "sequence"],
                name="payment_patient_sequence_unique",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.amount} from {self.patient_id} on {self.payment_date}"
