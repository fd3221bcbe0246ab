"""
Tests for clinic models.

Focus on the rules the payments ledger relies on: paid_amount cannot be
written through normal saves, and plan totals are computed from items.
"""

from datetime import time
from decimal import Decimal

import pytest
from django.db import IntegrityError
from django.utils import timezone

from clinic.models import Appointment
from clinic.tests.factories import (
    AppointmentFactory,
    TreatmentItemFactory,
    TreatmentPlanFactory,
)


class TestAppointmentPaidAmount:
    """paid_amount is owned by the payments reconciler."""

    def test_new_appointment_starts_unpaid(self, patient):
        appointment = Appointment(
            patient=patient,
            date=timezone.localdate(),
            start_time=time(10, 0),
            end_time=time(10, 30),
            paid_amount=Decimal("500.00"),
        )
        appointment.save()

        appointment.refresh_from_db()
        assert appointment.paid_amount == Decimal("0.00")

    def test_full_save_does_not_write_paid_amount(self, appointment):
        Appointment.objects.filter(pk=appointment.pk).update(paid_amount=Decimal("75.00"))

        appointment.paid_amount = Decimal("999.00")
        appointment.notes = "Bring x-rays"
        appointment.save()

        appointment.refresh_from_db()
        assert appointment.notes == "Bring x-rays"
        assert appointment.paid_amount == Decimal("75.00")

    def test_update_fields_paid_amount_is_ignored(self, appointment):
        appointment.paid_amount = Decimal("10.00")
        appointment.notes = "Moved"
        appointment.save(update_fields=["paid_amount", "notes"])

        appointment.refresh_from_db()
        assert appointment.notes == "Moved"
        assert appointment.paid_amount == Decimal("0.00")

    def test_end_must_follow_start(self, patient):
        with pytest.raises(IntegrityError):
            AppointmentFactory(
                patient=patient,
                start_time=time(11, 0),
                end_time=time(10, 0),
            )


class TestTreatmentPlanTotals:

    def test_line_total(self, db):
        item = TreatmentItemFactory(price_snapshot=Decimal("120.50"), quantity=3)

        assert item.line_total == Decimal("361.50")

    def test_plan_total_sums_items(self, treatment_plan):
        TreatmentItemFactory(plan=treatment_plan, price_snapshot=Decimal("100.00"), quantity=2)
        TreatmentItemFactory(plan=treatment_plan, price_snapshot=Decimal("50.25"))

        assert treatment_plan.total == Decimal("250.25")

    def test_empty_plan_total_is_zero(self, db):
        assert TreatmentPlanFactory().total == Decimal("0.00")

    def test_quantity_must_be_positive(self, treatment_plan):
        with pytest.raises(IntegrityError):
            TreatmentItemFactory(plan=treatment_plan, quantity=0)
