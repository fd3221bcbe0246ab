"""
Payment ledger service layer.

This module provides the PaymentService class which encapsulates all
business logic for the payments ledger. All ledger writes go through this
service so that validation, reconciliation and the audit trail happen in
one transaction.

Write operations:
    add_payment: Validate, insert, reconcile, audit, commit
    delete_payment: Snapshot, delete, reconcile, audit, commit

Read operations:
    get_patient_payments / get_payment_by_id / get_all_payments
    get_total_paid / get_remaining_balance
    get_patient_payment_summary / get_patients_with_outstanding_balance
    get_total_revenue / get_revenue_by_month / get_financial_report

Usage:
    from payments.services import payment_service
    from payments.types import AddPaymentParams

    record = payment_service.add_payment(
        AddPaymentParams(
            patient_id=patient.id,
            amount=Decimal("400.00"),
            payment_date=timezone.localdate(),
            appointment_id=appointment.id,
        ),
        actor_id=request.user.id,
    )

    summary = payment_service.get_patient_payment_summary(patient.id)
    print(summary.remaining_balance)

    payment_service.delete_payment(record.id, actor_id=request.user.id)
"""

from __future__ import annotations

import calendar
from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from django.db import DatabaseError, transaction
from django.db.models import DecimalField, Max, Sum, Value
from django.db.models.functions import Coalesce, ExtractMonth
from django.utils import timezone

from core.services import BaseService

from audit.models import AuditAction
from audit.services import AuditService
from clinic.services import AppointmentService, PatientService, TreatmentPlanService
from payments.exceptions import InvalidPayment, PaymentNotFound, PaymentStorageError
from payments.models import PaymentTransaction
from payments.reconciler import PaymentReconciler
from payments.types import (
    FinancialReport,
    PatientPaymentSummary,
    PaymentRecord,
)
from payments.validators import validate_payment

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from django.db.models import QuerySet

    from payments.types import AddPaymentParams

ZERO = Decimal("0.00")

MONEY_FIELD = DecimalField(max_digits=12, decimal_places=2)

RECENT_PAYMENTS_DAYS = 30
RECENT_PAYMENTS_LIMIT = 10

AUDIT_ENTITY = "PaymentTransaction"


class PaymentService(BaseService):
    """
    Service class for payment ledger operations.

    Key features:
    - Add and delete are all-or-nothing: the ledger row, the recomputed
      appointment paid amounts and the audit entry commit together
    - Per-patient serialization via a row lock on the patient
    - Database failures surface as PaymentStorageError after rollback

    All methods are class methods - no instance state is maintained.
    """

    # =========================================================================
    # Write operations
    # =========================================================================

    @classmethod
    def add_payment(
        cls,
        params: AddPaymentParams,
        actor_id: int | None = None,
    ) -> PaymentRecord:
        """
        Record a payment.

        Implementation:
            1. Validate input (no database access)
            2. Lock the patient row
            3. Check the appointment exists and belongs to the patient
            4. Insert the ledger row
            5. Recompute paid amounts for all of the patient's appointments
            6. Append a PAYMENT_ADDED audit entry
            7. Commit, then load display names

        Args:
            params: Payment input
            actor_id: User recording the payment

        Returns:
            PaymentRecord with patient and actor names resolved

        Raises:
            InvalidPayment: Input rejected, or appointment belongs to another patient
            PatientNotFound: No patient with params.patient_id
            AppointmentNotFound: No appointment with params.appointment_id
            PaymentStorageError: The database rejected the unit of work
        """
        validate_payment(params)

        try:
            with transaction.atomic():
                patient = PaymentReconciler.lock_patient(params.patient_id)

                if params.appointment_id is not None:
                    appointment = AppointmentService.get_appointment(params.appointment_id)
                    if appointment.patient_id != patient.id:
                        raise InvalidPayment(
                            "Appointment does not belong to this patient.",
                            details={
                                "appointment_id": [
                                    "Appointment does not belong to this patient."
                                ]
                            },
                        )

                payment = PaymentTransaction.objects.create(
                    patient=patient,
                    appointment_id=params.appointment_id,
                    amount=params.amount,
                    payment_date=params.payment_date,
                    notes=params.notes,
                    created_by_id=actor_id,
                    sequence=cls._next_sequence(patient.id),
                )

                PaymentReconciler.reconcile_locked(patient.id)

                AuditService.record(
                    entity_name=AUDIT_ENTITY,
                    entity_id=payment.id,
                    action=AuditAction.PAYMENT_ADDED,
                    actor_id=actor_id,
                    changes={
                        "payment_id": payment.id,
                        "patient_id": patient.id,
                        "appointment_id": params.appointment_id,
                        "amount": params.amount,
                        "payment_date": params.payment_date,
                        "notes": params.notes,
                    },
                )
        except DatabaseError as e:
            cls.get_logger().error(
                "Payment add rolled back",
                extra={"patient_id": str(params.patient_id), "error": str(e)},
                exc_info=True,
            )
            raise PaymentStorageError(
                "The payment could not be saved. No changes were made.",
                details={"patient_id": str(params.patient_id)},
            ) from e

        cls.get_logger().info(
            f"Payment {payment.id} of {payment.amount} recorded for patient {patient.id}",
            extra={
                "payment_id": str(payment.id),
                "patient_id": str(patient.id),
                "appointment_id": str(params.appointment_id or ""),
                "actor_id": actor_id,
            },
        )

        payment = PaymentTransaction.objects.select_related("patient", "created_by").get(
            pk=payment.pk
        )
        return PaymentRecord.from_transaction(payment)

    @classmethod
    def delete_payment(cls, payment_id: UUID, actor_id: int | None = None) -> None:
        """
        Delete a payment.

        The patient is locked before the payment so that add and delete
        take locks in the same order. The payment is re-read under the
        lock; a concurrent delete turns into PaymentNotFound.

        Raises:
            PaymentNotFound: No payment with this id
            PaymentStorageError: The database rejected the unit of work
        """
        try:
            with transaction.atomic():
                patient_id = (
                    PaymentTransaction.objects.filter(pk=payment_id)
                    .values_list("patient_id", flat=True)
                    .first()
                )
                if patient_id is None:
                    raise cls._payment_not_found(payment_id)

                PaymentReconciler.lock_patient(patient_id)

                payment = (
                    PaymentTransaction.objects.select_for_update()
                    .filter(pk=payment_id)
                    .first()
                )
                if payment is None:
                    raise cls._payment_not_found(payment_id)

                snapshot = {
                    "payment_id": payment.id,
                    "patient_id": payment.patient_id,
                    "appointment_id": payment.appointment_id,
                    "amount": payment.amount,
                    "payment_date": payment.payment_date,
                    "deleted_by": actor_id,
                }
                payment.delete()

                PaymentReconciler.reconcile_locked(patient_id)

                AuditService.record(
                    entity_name=AUDIT_ENTITY,
                    entity_id=payment_id,
                    action=AuditAction.PAYMENT_DELETED,
                    actor_id=actor_id,
                    changes=snapshot,
                )
        except DatabaseError as e:
            cls.get_logger().error(
                "Payment delete rolled back",
                extra={"payment_id": str(payment_id), "error": str(e)},
                exc_info=True,
            )
            raise PaymentStorageError(
                "The payment could not be deleted. No changes were made.",
                details={"payment_id": str(payment_id)},
            ) from e

        cls.get_logger().info(
            f"Payment {payment_id} of {snapshot['amount']} deleted for patient {patient_id}",
            extra={
                "payment_id": str(payment_id),
                "patient_id": str(patient_id),
                "actor_id": actor_id,
            },
        )

    @staticmethod
    def _next_sequence(patient_id: UUID) -> int:
        # Caller holds the patient lock, so max + 1 cannot race.
        current = PaymentTransaction.objects.filter(patient_id=patient_id).aggregate(
            current=Max("sequence")
        )["current"]
        return (current or 0) + 1

    @staticmethod
    def _payment_not_found(payment_id: UUID) -> PaymentNotFound:
        return PaymentNotFound(
            "Payment not found.",
            details={"payment_id": str(payment_id)},
        )

    # =========================================================================
    # Ledger reads
    # =========================================================================

    @staticmethod
    def _records(queryset: QuerySet[PaymentTransaction]) -> list[PaymentRecord]:
        return [
            PaymentRecord.from_transaction(payment)
            for payment in queryset.select_related("patient", "created_by")
        ]

    @classmethod
    def get_patient_payments(cls, patient_id: UUID) -> list[PaymentRecord]:
        """
        A patient's payments, newest payment date first.

        Payments on the same date keep the order they were recorded in.
        Unknown patients yield an empty list.
        """
        return cls._records(
            PaymentTransaction.objects.filter(patient_id=patient_id).order_by(
                "-payment_date", "sequence"
            )
        )

    @classmethod
    def get_payment_by_id(cls, payment_id: UUID) -> PaymentRecord | None:
        payment = (
            PaymentTransaction.objects.select_related("patient", "created_by")
            .filter(pk=payment_id)
            .first()
        )
        if payment is None:
            return None
        return PaymentRecord.from_transaction(payment)

    @classmethod
    def get_all_payments(
        cls,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[PaymentRecord]:
        """
        All payments, optionally limited to an inclusive payment_date range.
        """
        queryset = cls._in_range(PaymentTransaction.objects.all(), start_date, end_date)
        return cls._records(queryset.order_by("-payment_date", "created_at", "sequence"))

    @classmethod
    def get_total_paid(cls, patient_id: UUID) -> Decimal:
        """Sum of all of a patient's payments, linked to an appointment or not."""
        return cls._sum_amount(PaymentTransaction.objects.filter(patient_id=patient_id))

    @classmethod
    def get_remaining_balance(cls, patient_id: UUID) -> Decimal:
        """Total treatment cost minus total paid. Negative means overpaid."""
        return TreatmentPlanService.total_cost_for_patient(
            patient_id
        ) - cls.get_total_paid(patient_id)

    # =========================================================================
    # Summaries
    # =========================================================================

    @classmethod
    def get_patient_payment_summary(cls, patient_id: UUID) -> PatientPaymentSummary:
        """
        Cost, paid and remaining balance for one patient, with payment history.

        Raises:
            PatientNotFound: No patient with this id
        """
        patient = PatientService.get_patient(patient_id)
        return PatientPaymentSummary(
            patient_id=patient.id,
            patient_name=patient.full_name,
            total_cost=TreatmentPlanService.total_cost_for_patient(patient.id),
            total_paid=cls.get_total_paid(patient.id),
            payments=cls.get_patient_payments(patient.id),
        )

    @classmethod
    def get_patients_with_outstanding_balance(cls) -> list[PatientPaymentSummary]:
        """
        Active patients who still owe money, largest balance first.

        A patient is included only when remaining_balance is strictly
        positive. Summaries carry no payment history.
        """
        cost_by_patient = TreatmentPlanService.total_cost_by_patient()
        paid_by_patient = dict(
            PaymentTransaction.objects.values("patient_id")
            .annotate(total=Sum("amount"))
            .order_by()
            .values_list("patient_id", "total")
        )

        summaries = []
        for patient in PatientService.active_patients().only("id", "full_name"):
            summary = PatientPaymentSummary(
                patient_id=patient.id,
                patient_name=patient.full_name,
                total_cost=cost_by_patient.get(patient.id, ZERO),
                total_paid=paid_by_patient.get(patient.id, ZERO),
            )
            if summary.remaining_balance > 0:
                summaries.append(summary)

        summaries.sort(key=lambda s: (-s.remaining_balance, s.patient_name))
        return summaries

    # =========================================================================
    # Revenue
    # =========================================================================

    @classmethod
    def get_total_revenue(
        cls,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Decimal:
        """Sum of payments in an inclusive payment_date range; 0.00 when empty."""
        return cls._sum_amount(
            cls._in_range(PaymentTransaction.objects.all(), start_date, end_date)
        )

    @classmethod
    def get_revenue_by_month(cls, year: int) -> dict[str, Decimal]:
        """
        Revenue per calendar month of a year.

        Always returns all twelve months, January to December, with 0.00
        for months without payments.
        """
        rows = (
            PaymentTransaction.objects.filter(payment_date__year=year)
            .annotate(month=ExtractMonth("payment_date"))
            .values("month")
            .annotate(total=Sum("amount"))
            .order_by()
        )
        totals = {row["month"]: row["total"] for row in rows}
        return {
            calendar.month_name[month]: totals.get(month, ZERO)
            for month in range(1, 13)
        }

    @classmethod
    def get_financial_report(cls, year: int | None = None) -> FinancialReport:
        """
        Figures for the financial reports screen.

        Includes revenue for the year and the current month, outstanding
        balances across active patients, monthly revenue and the most
        recent payments of the last 30 days.
        """
        today = timezone.localdate()
        year = year or today.year

        outstanding = cls.get_patients_with_outstanding_balance()
        recent = PaymentTransaction.objects.filter(
            payment_date__gte=today - timedelta(days=RECENT_PAYMENTS_DAYS)
        ).order_by("-payment_date", "-created_at")[:RECENT_PAYMENTS_LIMIT]

        return FinancialReport(
            year=year,
            total_revenue=cls.get_total_revenue(
                today.replace(year=year, month=1, day=1),
                today.replace(year=year, month=12, day=31),
            ),
            revenue_this_month=cls.get_total_revenue(
                today.replace(day=1),
                today.replace(day=calendar.monthrange(today.year, today.month)[1]),
            ),
            outstanding_total=sum((s.remaining_balance for s in outstanding), ZERO),
            outstanding_patient_count=len(outstanding),
            monthly_revenue=cls.get_revenue_by_month(year),
            recent_payments=cls._records(recent),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _in_range(
        queryset: QuerySet[PaymentTransaction],
        start_date: date | None,
        end_date: date | None,
    ) -> QuerySet[PaymentTransaction]:
        if start_date is not None:
            queryset = queryset.filter(payment_date__gte=start_date)
        if end_date is not None:
            queryset = queryset.filter(payment_date__lte=end_date)
        return queryset

    @staticmethod
    def _sum_amount(queryset: QuerySet[PaymentTransaction]) -> Decimal:
        return queryset.aggregate(
            total=Coalesce(Sum("amount"), Value(ZERO), output_field=MONEY_FIELD)
        )["total"]


# Singleton instance for convenient access
payment_service = PaymentService()
