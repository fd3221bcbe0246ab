"""
Factory Boy factories for payment test data.

PaymentTransactionFactory writes ledger rows directly, bypassing
PaymentService. Appointment paid amounts are NOT updated, which makes it
the tool for setting up drift that the reconciler should repair. Use
PaymentService.add_payment when the test needs the full unit of work.

Usage:
    from payments.tests.factories import PaymentTransactionFactory

    payment = PaymentTransactionFactory(patient=patient, amount=Decimal("50.00"))
    linked = PaymentTransactionFactory(appointment=appointment)

    # Input for PaymentService.add_payment
    params = make_params(patient, "250.00", appointment=appointment)
"""

from decimal import Decimal

import factory
from django.utils import timezone

from clinic.tests.factories import PatientFactory
from payments.models import PaymentTransaction
from payments.types import AddPaymentParams


class PaymentTransactionFactory(factory.django.DjangoModelFactory):
    """
    Factory for PaymentTransaction.

    When an appointment is given, the patient defaults to the
    appointment's patient.
    """

    class Meta:
        model = PaymentTransaction

    patient = factory.LazyAttribute(
        lambda o: o.appointment.patient if o.appointment else PatientFactory()
    )
    appointment = None
    amount = Decimal("100.00")
    payment_date = factory.LazyFunction(timezone.localdate)
    notes = ""
    sequence = factory.Sequence(lambda n: n + 1)


def make_params(patient, amount, appointment=None, payment_date=None, notes=""):
    """Build AddPaymentParams for a patient, dated today unless given."""
    return AddPaymentParams(
        patient_id=patient.id,
        amount=Decimal(amount) if isinstance(amount, str) else amount,
        payment_date=payment_date or timezone.localdate(),
        appointment_id=appointment.id if appointment else None,
        notes=notes,
    )
