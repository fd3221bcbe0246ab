"""
Tests for clinic services.
"""

import uuid
from decimal import Decimal

import pytest

from clinic.discounts import FixedDiscount, PercentageDiscount
from clinic.exceptions import AppointmentNotFound, PatientNotFound
from clinic.services import AppointmentService, PatientService, TreatmentPlanService
from clinic.tests.factories import (
    PatientFactory,
    PriceListItemFactory,
    TreatmentItemFactory,
    TreatmentPlanFactory,
)


class TestLookups:

    def test_get_patient(self, patient):
        assert PatientService.get_patient(patient.id) == patient

    def test_get_patient_missing(self, db):
        with pytest.raises(PatientNotFound) as exc_info:
            PatientService.get_patient(uuid.uuid4())

        assert exc_info.value.error_code == "PATIENT_NOT_FOUND"

    def test_get_appointment_missing(self, db):
        with pytest.raises(AppointmentNotFound):
            AppointmentService.get_appointment(uuid.uuid4())

    def test_active_patients_excludes_inactive(self, patient):
        inactive = PatientFactory(is_active=False)

        active = list(PatientService.active_patients())

        assert patient in active
        assert inactive not in active


class TestTotalCost:

    def test_sums_across_plans(self, patient):
        TreatmentItemFactory(plan__patient=patient, price_snapshot=Decimal("300.00"), quantity=2)
        TreatmentItemFactory(plan__patient=patient, price_snapshot=Decimal("150.00"))

        assert TreatmentPlanService.total_cost_for_patient(patient.id) == Decimal("750.00")

    def test_no_plans_is_zero(self, patient):
        assert TreatmentPlanService.total_cost_for_patient(patient.id) == Decimal("0.00")

    def test_by_patient(self, patient):
        other = PatientFactory()
        TreatmentItemFactory(plan__patient=patient, price_snapshot=Decimal("100.00"))
        TreatmentItemFactory(plan__patient=other, price_snapshot=Decimal("40.00"), quantity=3)
        TreatmentPlanFactory()  # no items

        totals = TreatmentPlanService.total_cost_by_patient()

        assert totals == {patient.id: Decimal("100.00"), other.id: Decimal("120.00")}


class TestAddItem:

    def test_snapshots_name_and_price(self, treatment_plan, price_list_item):
        result = TreatmentPlanService.add_item(treatment_plan, price_list_item, quantity=2)

        assert result.success
        item = result.data
        assert item.name_snapshot == "Filling"
        assert item.price_snapshot == Decimal("150.00")

        price_list_item.default_price = Decimal("200.00")
        price_list_item.save()
        item.refresh_from_db()
        assert item.price_snapshot == Decimal("150.00")

    def test_rejects_zero_quantity(self, treatment_plan, price_list_item):
        result = TreatmentPlanService.add_item(treatment_plan, price_list_item, quantity=0)

        assert not result.success
        assert result.error_code == "INVALID_QUANTITY"

    def test_rejects_retired_entry(self, treatment_plan):
        retired = PriceListItemFactory(is_active=False)

        result = TreatmentPlanService.add_item(treatment_plan, retired)

        assert result.error_code == "INACTIVE_PRICE_LIST_ITEM"
        assert treatment_plan.items.count() == 0


class TestApplyDiscount:

    def test_discounts_every_item(self, treatment_plan):
        TreatmentItemFactory(plan=treatment_plan, price_snapshot=Decimal("200.00"))
        TreatmentItemFactory(plan=treatment_plan, price_snapshot=Decimal("50.00"), quantity=2)

        result = TreatmentPlanService.apply_discount(
            treatment_plan.id, PercentageDiscount(Decimal("10"))
        )

        assert result.success
        prices = sorted(treatment_plan.items.values_list("price_snapshot", flat=True))
        assert prices == [Decimal("45.00"), Decimal("180.00")]
        assert treatment_plan.total == Decimal("270.00")

    def test_empty_plan(self, treatment_plan):
        result = TreatmentPlanService.apply_discount(
            treatment_plan.id, FixedDiscount(Decimal("5"))
        )

        assert result.error_code == "EMPTY_PLAN"

    def test_unknown_plan(self, db):
        result = TreatmentPlanService.apply_discount(uuid.uuid4(), FixedDiscount(Decimal("5")))

        assert result.error_code == "TREATMENT_PLAN_NOT_FOUND"
