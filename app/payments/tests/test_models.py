"""
Tests for the PaymentTransaction model.

Database constraints are the last line of defense behind validation, so
these write rows directly.
"""

from decimal import Decimal

import pytest
from django.db import IntegrityError
from django.db.models import ProtectedError

from payments.models import PaymentTransaction
from payments.tests.factories import PaymentTransactionFactory


class TestPaymentTransactionModel:

    def test_create(self, patient):
        payment = PaymentTransactionFactory(patient=patient, amount=Decimal("49.99"))

        payment.refresh_from_db()
        assert payment.amount == Decimal("49.99")
        assert payment.appointment is None
        assert payment.created_at is not None

    def test_patient_defaults_to_appointment_patient(self, appointment):
        payment = PaymentTransactionFactory(appointment=appointment)

        assert payment.patient_id == appointment.patient_id

    @pytest.mark.parametrize("amount", ["0.00", "-5.00"])
    def test_amount_must_be_positive(self, patient, amount):
        with pytest.raises(IntegrityError):
            PaymentTransactionFactory(patient=patient, amount=Decimal(amount))

    def test_sequence_unique_per_patient(self, patient):
        PaymentTransactionFactory(patient=patient, sequence=1)

        with pytest.raises(IntegrityError):
            PaymentTransactionFactory(patient=patient, sequence=1)

    def test_appointment_with_payments_cannot_be_deleted(self, appointment):
        PaymentTransactionFactory(appointment=appointment)

        with pytest.raises(ProtectedError):
            appointment.delete()

    def test_default_ordering(self, patient):
        older = PaymentTransactionFactory(patient=patient, payment_date="2024-01-10", sequence=1)
        newer = PaymentTransactionFactory(patient=patient, payment_date="2024-02-01", sequence=2)
        same_day = PaymentTransactionFactory(patient=patient, payment_date="2024-01-10", sequence=3)

        assert list(PaymentTransaction.objects.all()) == [newer, older, same_day]
