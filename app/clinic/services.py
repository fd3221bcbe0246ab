"""
Clinic service layer.

Services:
    PatientService: Patient lookup and active-patient enumeration
    AppointmentService: Appointment lookup and per-patient listing
    TreatmentPlanService: Plan items, discounts and the patient's total cost

Design Principles:
    - Services are stateless (use class methods)
    - Lookups the ledger depends on raise NotFoundError subclasses
    - Plan editing returns ServiceResult for expected failures

Usage:
    from clinic.services import PatientService, TreatmentPlanService

    patient = PatientService.get_patient(patient_id)
    total_cost = TreatmentPlanService.total_cost_for_patient(patient.id)
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from django.db.models import DecimalField, ExpressionWrapper, F, Sum, Value
from django.db.models.functions import Coalesce

from core.services import BaseService, ServiceResult

from clinic.exceptions import AppointmentNotFound, PatientNotFound
from clinic.models import Appointment, Patient, TreatmentItem, TreatmentPlan

if TYPE_CHECKING:
    from uuid import UUID

    from django.db.models import QuerySet

    from clinic.discounts import Discount
    from clinic.models import PriceListItem

ZERO = Decimal("0.00")

MONEY_FIELD = DecimalField(max_digits=12, decimal_places=2)

LINE_TOTAL = ExpressionWrapper(
    F("price_snapshot") * F("quantity"),
    output_field=MONEY_FIELD,
)


class PatientService(BaseService):
    """Patient lookups used by the ledger."""

    @classmethod
    def get_patient(cls, patient_id: UUID) -> Patient:
        """
        Fetch a patient by id.

        Raises:
            PatientNotFound: No patient with this id
        """
        patient = Patient.objects.filter(pk=patient_id).first()
        if patient is None:
            raise PatientNotFound(
                "Patient not found.",
                details={"patient_id": str(patient_id)},
            )
        return patient

    @classmethod
    def active_patients(cls) -> QuerySet[Patient]:
        return Patient.objects.filter(is_active=True)


class AppointmentService(BaseService):
    """Appointment lookups used by the ledger."""

    @classmethod
    def get_appointment(cls, appointment_id: UUID) -> Appointment:
        """
        Fetch an appointment by id.

        Raises:
            AppointmentNotFound: No appointment with this id
        """
        appointment = Appointment.objects.filter(pk=appointment_id).first()
        if appointment is None:
            raise AppointmentNotFound(
                "Appointment not found.",
                details={"appointment_id": str(appointment_id)},
            )
        return appointment

    @classmethod
    def for_patient(cls, patient_id: UUID) -> QuerySet[Appointment]:
        return Appointment.objects.filter(patient_id=patient_id)


class TreatmentPlanService(BaseService):
    """
    Treatment plan operations.

    The payments ledger only consumes total_cost_for_patient() and
    total_cost_by_patient(); everything else supports plan editing.
    """

    @classmethod
    def total_cost_for_patient(cls, patient_id: UUID) -> Decimal:
        """
        Sum of line totals across every treatment plan of the patient.

        Returns:
            Decimal, 0.00 when the patient has no plans or items
        """
        return TreatmentItem.objects.filter(plan__patient_id=patient_id).aggregate(
            total=Coalesce(Sum(LINE_TOTAL), Value(ZERO), output_field=MONEY_FIELD)
        )["total"]

    @classmethod
    def total_cost_by_patient(cls) -> dict[UUID, Decimal]:
        """
        Total treatment cost for every patient that has plan items.

        Patients without items are absent from the mapping.
        """
        rows = (
            TreatmentItem.objects.values("plan__patient_id")
            .annotate(total=Sum(LINE_TOTAL, output_field=MONEY_FIELD))
            .order_by()
        )
        return {row["plan__patient_id"]: row["total"] for row in rows}

    @classmethod
    def add_item(
        cls,
        plan: TreatmentPlan,
        price_list_item: PriceListItem,
        quantity: int = 1,
    ) -> ServiceResult[TreatmentItem]:
        """
        Add a price list entry to a plan, snapshotting its name and price.

        Error codes:
            INVALID_QUANTITY: Quantity below 1
            INACTIVE_PRICE_LIST_ITEM: The price list entry is retired
        """
        if quantity < 1:
            return ServiceResult.failure(
                "Quantity must be at least 1.",
                error_code="INVALID_QUANTITY",
                errors={"quantity": ["Quantity must be at least 1."]},
            )
        if not price_list_item.is_active:
            return ServiceResult.failure(
                f"'{price_list_item.name}' is no longer offered.",
                error_code="INACTIVE_PRICE_LIST_ITEM",
            )

        item = TreatmentItem.objects.create(
            plan=plan,
            price_list_item=price_list_item,
            name_snapshot=price_list_item.name,
            price_snapshot=price_list_item.default_price,
            quantity=quantity,
        )

        cls.get_logger().info(
            f"Added {item.name_snapshot} x{quantity} to treatment plan {plan.id}"
        )
        return ServiceResult.success(item)

    @classmethod
    def apply_discount(
        cls,
        plan_id: UUID,
        discount: Discount,
    ) -> ServiceResult[TreatmentPlan]:
        """
        Apply a discount to every item of a plan.

        Each item's price_snapshot is reduced in place (never below zero).
        All items are updated in one transaction.

        Error codes:
            TREATMENT_PLAN_NOT_FOUND: No plan with this id
            EMPTY_PLAN: The plan has no items to discount
        """
        plan = TreatmentPlan.objects.filter(pk=plan_id).first()
        if plan is None:
            return ServiceResult.failure(
                "Treatment plan not found.",
                error_code="TREATMENT_PLAN_NOT_FOUND",
            )

        with cls.atomic():
            items = list(plan.items.select_for_update())
            if not items:
                return ServiceResult.failure(
                    "Treatment plan has no items to discount.",
                    error_code="EMPTY_PLAN",
                )
            for item in items:
                discount.apply_to(item)
            TreatmentItem.objects.bulk_update(items, ["price_snapshot"])

        cls.get_logger().info(
            f"Applied discount {discount.describe()} to treatment plan {plan.id}",
            extra={"plan_id": str(plan.id), "item_count": len(items)},
        )
        return ServiceResult.success(plan)
