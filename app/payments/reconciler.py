"""
Reconciliation of appointment paid amounts against the payment ledger.

Appointment.paid_amount is a cached projection: for each appointment it
must equal the sum of payments linked to that appointment. PaymentReconciler
is the only code that writes it. It rebuilds the projection from the
ledger, so running it any number of times gives the same result.

Policy:
    Payments without an appointment (patient-level credits) count toward
    the patient's total paid but are NOT spread across appointments. An
    appointment's paid_amount only ever reflects payments linked to it.

Usage:
    from payments.reconciler import reconciler

    # Repair one patient
    result = reconciler.recalculate_payment_totals(patient.id)
    print(result.appointments_changed)

    # Repair everyone (admin sweep / nightly task)
    processed = reconciler.recalculate_all()
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from django.db.models import Sum

from core.services import BaseService

from clinic.exceptions import PatientNotFound
from clinic.models import Appointment, Patient
from payments.models import PaymentTransaction
from payments.types import ReconciliationResult

if TYPE_CHECKING:
    from uuid import UUID

ZERO = Decimal("0.00")


class PaymentReconciler(BaseService):
    """
    Recomputes Appointment.paid_amount from the ledger.

    Per-patient work runs in a transaction holding a row lock on the
    patient, the same lock PaymentService takes, so reconciliation never
    sees a half-applied add or delete for that patient.
    """

    @classmethod
    def lock_patient(cls, patient_id: UUID) -> Patient:
        """
        Lock the patient row for the rest of the current transaction.

        Must be called inside transaction.atomic().

        Raises:
            PatientNotFound: No patient with this id
        """
        patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
        if patient is None:
            raise PatientNotFound(
                "Patient not found.",
                details={"patient_id": str(patient_id)},
            )
        return patient

    @classmethod
    def recalculate_payment_totals(cls, patient_id: UUID) -> ReconciliationResult:
        """
        Rebuild paid_amount for every appointment of a patient.

        Opens its own transaction (a savepoint when called inside one).

        Returns:
            ReconciliationResult with appointment counts

        Raises:
            PatientNotFound: No patient with this id
        """
        with cls.atomic():
            cls.lock_patient(patient_id)
            result = cls.reconcile_locked(patient_id)

        if result.appointments_changed:
            cls.get_logger().info(
                f"Corrected paid amounts for patient {patient_id}",
                extra={
                    "patient_id": str(patient_id),
                    "appointments_changed": result.appointments_changed,
                },
            )
        return result

    @classmethod
    def reconcile_locked(cls, patient_id: UUID) -> ReconciliationResult:
        """
        Rebuild paid_amount for a patient whose row is already locked.

        Called by PaymentService inside its own transaction, right after
        the ledger mutation. All changed appointments are written with a
        single bulk_update.
        """
        appointments = list(Appointment.objects.filter(patient_id=patient_id))

        linked_totals = dict(
            PaymentTransaction.objects.filter(appointment__patient_id=patient_id)
            .values("appointment_id")
            .annotate(total=Sum("amount"))
            .order_by()
            .values_list("appointment_id", "total")
        )

        changed: list[Appointment] = []
        for appointment in appointments:
            expected = linked_totals.get(appointment.id, ZERO)
            if appointment.paid_amount != expected:
                appointment.paid_amount = expected
                changed.append(appointment)

        if changed:
            Appointment.objects.bulk_update(changed, ["paid_amount"])

        return ReconciliationResult(
            patient_id=patient_id,
            appointments_checked=len(appointments),
            appointments_changed=len(changed),
        )

    @classmethod
    def recalculate_all(cls) -> int:
        """
        Reconcile every patient, active or not.

        Each patient is its own transaction. A failure for one patient is
        logged and the sweep moves on to the next.

        Returns:
            Number of patients reconciled successfully
        """
        patient_ids = list(Patient.objects.order_by("pk").values_list("pk", flat=True))
        processed = 0
        corrected = 0

        for patient_id in patient_ids:
            try:
                result = cls.recalculate_payment_totals(patient_id)
            except Exception as e:
                cls.get_logger().error(
                    "Error reconciling patient payment totals",
                    extra={"patient_id": str(patient_id), "error": str(e)},
                    exc_info=True,
                )
                continue
            processed += 1
            corrected += result.appointments_changed

        cls.get_logger().info(
            f"Payment totals recalculated for {processed} of {len(patient_ids)} patients",
            extra={
                "processed": processed,
                "failed": len(patient_ids) - processed,
                "appointments_changed": corrected,
            },
        )
        return processed


# Singleton instance for convenient access
reconciler = PaymentReconciler()
