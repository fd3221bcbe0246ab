"""
Tests for PaymentReconciler.

Drift is created by writing ledger rows with the factory (bypassing
PaymentService) or by updating paid_amount with a queryset update.
"""

import uuid
from decimal import Decimal
from unittest import mock

import pytest

from clinic.exceptions import PatientNotFound
from clinic.models import Appointment
from clinic.tests.factories import AppointmentFactory, PatientFactory
from payments.reconciler import PaymentReconciler, reconciler
from payments.tests.factories import PaymentTransactionFactory


def paid_amounts(patient):
    return dict(
        Appointment.objects.filter(patient=patient).values_list("id", "paid_amount")
    )


class TestRecalculatePaymentTotals:

    def test_repairs_drift(self, patient, appointment, other_appointment):
        PaymentTransactionFactory(appointment=appointment, amount=Decimal("120.00"))
        PaymentTransactionFactory(appointment=appointment, amount=Decimal("30.00"))
        Appointment.objects.filter(pk=other_appointment.pk).update(
            paid_amount=Decimal("999.00")
        )

        result = PaymentReconciler.recalculate_payment_totals(patient.id)

        assert result.appointments_checked == 2
        assert result.appointments_changed == 2
        assert paid_amounts(patient) == {
            appointment.id: Decimal("150.00"),
            other_appointment.id: Decimal("0.00"),
        }

    def test_is_idempotent(self, patient, appointment, other_appointment):
        PaymentTransactionFactory(appointment=appointment, amount=Decimal("45.10"))
        PaymentTransactionFactory(appointment=other_appointment, amount=Decimal("5.00"))

        reconciler.recalculate_payment_totals(patient.id)
        first = paid_amounts(patient)
        second_result = reconciler.recalculate_payment_totals(patient.id)

        assert paid_amounts(patient) == first
        assert second_result.appointments_changed == 0

    def test_unlinked_credit_is_not_distributed(self, patient, appointment):
        PaymentTransactionFactory(patient=patient, amount=Decimal("500.00"))

        reconciler.recalculate_payment_totals(patient.id)

        appointment.refresh_from_db()
        assert appointment.paid_amount == Decimal("0.00")

    def test_patient_without_appointments(self, patient):
        PaymentTransactionFactory(patient=patient)

        result = reconciler.recalculate_payment_totals(patient.id)

        assert result.appointments_checked == 0

    def test_unknown_patient(self, db):
        with pytest.raises(PatientNotFound):
            reconciler.recalculate_payment_totals(uuid.uuid4())

    def test_other_patients_untouched(self, patient, appointment):
        other = AppointmentFactory()
        Appointment.objects.filter(pk=other.pk).update(paid_amount=Decimal("7.00"))

        reconciler.recalculate_payment_totals(patient.id)

        other.refresh_from_db()
        assert other.paid_amount == Decimal("7.00")


class TestRecalculateAll:

    def test_processes_every_patient(self, patient, appointment):
        inactive = PatientFactory(is_active=False)
        inactive_visit = AppointmentFactory(patient=inactive)
        PaymentTransactionFactory(appointment=appointment, amount=Decimal("10.00"))
        PaymentTransactionFactory(appointment=inactive_visit, amount=Decimal("20.00"))

        processed = reconciler.recalculate_all()

        assert processed == 2
        appointment.refresh_from_db()
        inactive_visit.refresh_from_db()
        assert appointment.paid_amount == Decimal("10.00")
        assert inactive_visit.paid_amount == Decimal("20.00")

    def test_failure_for_one_patient_does_not_stop_sweep(self, patient, other_patient):
        broken_id = min(patient.id, other_patient.id)
        healthy = other_patient if broken_id == patient.id else patient
        visit = AppointmentFactory(patient=healthy)
        PaymentTransactionFactory(appointment=visit, amount=Decimal("33.00"))
        original = PaymentReconciler.recalculate_payment_totals

        def flaky(patient_id):
            if patient_id == broken_id:
                raise RuntimeError("lock timeout")
            return original(patient_id)

        with mock.patch.object(
            PaymentReconciler, "recalculate_payment_totals", side_effect=flaky
        ):
            processed = PaymentReconciler.recalculate_all()

        assert processed == 1
        visit.refresh_from_db()
        assert visit.paid_amount == Decimal("33.00")

    def test_no_patients(self, db):
        assert reconciler.recalculate_all() == 0
