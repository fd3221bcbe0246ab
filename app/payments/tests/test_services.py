"""
Tests for PaymentService ledger mutations and reads.

Each mutation is a single unit of work: ledger row, appointment paid
amounts and audit entry are committed together or not at all.
"""

import uuid
from datetime import date
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from audit.models import AuditAction, AuditLog
from audit.services import AuditService
from clinic.exceptions import AppointmentNotFound, PatientNotFound
from clinic.tests.factories import AppointmentFactory
from payments.exceptions import InvalidPayment, PaymentNotFound, PaymentStorageError
from payments.models import PaymentTransaction
from payments.services import PaymentService, payment_service
from payments.tests.factories import PaymentTransactionFactory, make_params


class TestAddPayment:

    def test_records_linked_payment(self, patient, appointment, receptionist):
        record = PaymentService.add_payment(
            make_params(patient, "250.00", appointment=appointment, notes=" Card "),
            actor_id=receptionist.id,
        )

        assert record.patient_id == patient.id
        assert record.patient_name == "Jane Roe"
        assert record.appointment_id == appointment.id
        assert record.amount == Decimal("250.00")
        assert record.notes == "Card"
        assert record.created_by_id == receptionist.id
        assert record.created_by_name == receptionist.get_full_name()

        appointment.refresh_from_db()
        assert appointment.paid_amount == Decimal("250.00")

    def test_unlinked_payment_touches_no_appointment(self, patient, appointment):
        PaymentService.add_payment(make_params(patient, "300.00"))

        appointment.refresh_from_db()
        assert appointment.paid_amount == Decimal("0.00")
        assert PaymentService.get_total_paid(patient.id) == Decimal("300.00")

    def test_payments_accumulate_per_appointment(
        self, patient, appointment, other_appointment
    ):
        PaymentService.add_payment(make_params(patient, "100.00", appointment=appointment))
        PaymentService.add_payment(make_params(patient, "50.50", appointment=appointment))
        PaymentService.add_payment(
            make_params(patient, "20.00", appointment=other_appointment)
        )

        appointment.refresh_from_db()
        other_appointment.refresh_from_db()
        assert appointment.paid_amount == Decimal("150.50")
        assert other_appointment.paid_amount == Decimal("20.00")

    def test_writes_audit_entry(self, patient, appointment, receptionist):
        record = PaymentService.add_payment(
            make_params(patient, "80.00", appointment=appointment, payment_date=date(2024, 3, 5)),
            actor_id=receptionist.id,
        )

        entry = AuditLog.objects.get()
        assert entry.entity_name == "PaymentTransaction"
        assert entry.entity_id == str(record.id)
        assert entry.action == AuditAction.PAYMENT_ADDED
        assert entry.actor_id == str(receptionist.id)
        assert entry.changes == {
            "payment_id": str(record.id),
            "patient_id": str(patient.id),
            "appointment_id": str(appointment.id),
            "amount": "80.00",
            "payment_date": "2024-03-05",
            "notes": "",
        }

    def test_without_actor(self, patient):
        record = PaymentService.add_payment(make_params(patient, "10.00"))

        assert record.created_by_id is None
        assert record.created_by_name == "Unknown"

    def test_sequence_increases_per_patient(self, patient, other_patient):
        first = PaymentService.add_payment(make_params(patient, "1.00"))
        PaymentService.add_payment(make_params(other_patient, "1.00"))
        second = PaymentService.add_payment(make_params(patient, "1.00"))

        sequences = dict(PaymentTransaction.objects.values_list("id", "sequence"))
        assert sequences[second.id] == sequences[first.id] + 1

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_non_positive_amount_writes_nothing(self, patient, amount):
        with pytest.raises(InvalidPayment):
            PaymentService.add_payment(make_params(patient, amount))

        assert not PaymentTransaction.objects.exists()
        assert not AuditLog.objects.exists()

    def test_unknown_patient(self, db):
        params = make_params(mock.Mock(id=uuid.uuid4()), "10.00")

        with pytest.raises(PatientNotFound):
            PaymentService.add_payment(params)

        assert not PaymentTransaction.objects.exists()

    def test_unknown_appointment(self, patient):
        params = make_params(patient, "10.00")
        params.appointment_id = uuid.uuid4()

        with pytest.raises(AppointmentNotFound):
            PaymentService.add_payment(params)

        assert not PaymentTransaction.objects.exists()

    def test_appointment_of_another_patient(self, patient, other_patient):
        foreign = AppointmentFactory(patient=other_patient)

        with pytest.raises(InvalidPayment) as exc_info:
            PaymentService.add_payment(make_params(patient, "10.00", appointment=foreign))

        assert "appointment_id" in exc_info.value.details
        assert not PaymentTransaction.objects.exists()
        foreign.refresh_from_db()
        assert foreign.paid_amount == Decimal("0.00")

    def test_storage_failure_rolls_back_everything(self, patient, appointment):
        PaymentService.add_payment(make_params(patient, "40.00", appointment=appointment))

        with mock.patch.object(
            AuditService, "record", side_effect=DatabaseError("disk I/O error")
        ):
            with pytest.raises(PaymentStorageError) as exc_info:
                PaymentService.add_payment(
                    make_params(patient, "60.00", appointment=appointment)
                )

        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert PaymentTransaction.objects.filter(patient=patient).count() == 1
        appointment.refresh_from_db()
        assert appointment.paid_amount == Decimal("40.00")
        assert AuditLog.objects.count() == 1


class TestDeletePayment:

    def test_reduces_paid_amount(self, patient, appointment, system_admin):
        keep = PaymentService.add_payment(
            make_params(patient, "25.00", appointment=appointment)
        )
        remove = PaymentService.add_payment(
            make_params(patient, "75.00", appointment=appointment)
        )

        PaymentService.delete_payment(remove.id, actor_id=system_admin.id)

        appointment.refresh_from_db()
        assert appointment.paid_amount == Decimal("25.00")
        assert list(PaymentTransaction.objects.values_list("id", flat=True)) == [keep.id]

    def test_audit_snapshot(self, patient, appointment, system_admin):
        record = PaymentService.add_payment(
            make_params(patient, "75.00", appointment=appointment, payment_date=date(2024, 1, 2))
        )

        PaymentService.delete_payment(record.id, actor_id=system_admin.id)

        entry = AuditLog.objects.get(action=AuditAction.PAYMENT_DELETED)
        assert entry.entity_id == str(record.id)
        assert entry.actor_id == str(system_admin.id)
        assert entry.changes == {
            "payment_id": str(record.id),
            "patient_id": str(patient.id),
            "appointment_id": str(appointment.id),
            "amount": "75.00",
            "payment_date": "2024-01-02",
            "deleted_by": system_admin.id,
        }

    def test_unknown_payment(self, db):
        with pytest.raises(PaymentNotFound):
            PaymentService.delete_payment(uuid.uuid4())

        assert not AuditLog.objects.exists()

    def test_storage_failure_keeps_payment(self, patient, appointment):
        record = PaymentService.add_payment(
            make_params(patient, "75.00", appointment=appointment)
        )

        with mock.patch.object(AuditService, "record", side_effect=DatabaseError("gone")):
            with pytest.raises(PaymentStorageError):
                PaymentService.delete_payment(record.id)

        assert PaymentTransaction.objects.filter(pk=record.id).exists()
        appointment.refresh_from_db()
        assert appointment.paid_amount == Decimal("75.00")


class TestLedgerReads:

    def test_patient_payments_newest_first_ties_in_recorded_order(self, patient):
        first = PaymentService.add_payment(
            make_params(patient, "1.00", payment_date=date(2024, 5, 1))
        )
        newest = PaymentService.add_payment(
            make_params(patient, "2.00", payment_date=date(2024, 5, 20))
        )
        second = PaymentService.add_payment(
            make_params(patient, "3.00", payment_date=date(2024, 5, 1))
        )

        ids = [p.id for p in PaymentService.get_patient_payments(patient.id)]

        assert ids == [newest.id, first.id, second.id]

    def test_patient_payments_unknown_patient_is_empty(self, db):
        assert PaymentService.get_patient_payments(uuid.uuid4()) == []

    def test_get_payment_by_id(self, patient):
        record = PaymentService.add_payment(make_params(patient, "5.00"))

        assert PaymentService.get_payment_by_id(record.id) == record
        assert PaymentService.get_payment_by_id(uuid.uuid4()) is None

    def test_all_payments_inclusive_range(self, patient, other_patient):
        PaymentTransactionFactory(patient=patient, payment_date=date(2024, 1, 31))
        inside_start = PaymentTransactionFactory(patient=patient, payment_date=date(2024, 2, 1))
        inside_end = PaymentTransactionFactory(
            patient=other_patient, payment_date=date(2024, 2, 29)
        )
        PaymentTransactionFactory(patient=other_patient, payment_date=date(2024, 3, 1))

        payments = PaymentService.get_all_payments(date(2024, 2, 1), date(2024, 2, 29))

        assert [p.id for p in payments] == [inside_end.id, inside_start.id]

    def test_total_paid_counts_linked_and_unlinked(self, patient, appointment):
        PaymentTransactionFactory(patient=patient, amount=Decimal("10.00"))
        PaymentTransactionFactory(appointment=appointment, amount=Decimal("15.50"))
        PaymentTransactionFactory(amount=Decimal("99.00"))

        assert PaymentService.get_total_paid(patient.id) == Decimal("25.50")

    def test_total_paid_without_payments(self, patient):
        assert PaymentService.get_total_paid(patient.id) == Decimal("0.00")

    def test_remaining_balance_may_go_negative(self, patient_with_plan):
        PaymentTransactionFactory(patient=patient_with_plan, amount=Decimal("1200.00"))

        assert payment_service.get_remaining_balance(patient_with_plan.id) == Decimal(
            "-200.00"
        )
