"""
Tests for clinic admin configuration.
"""

from django.contrib.admin.sites import site

from clinic.models import Appointment
from payments.tests.factories import PaymentTransactionFactory


class TestAppointmentAdmin:

    def test_patient_editable_without_payments(self, rf, appointment):
        model_admin = site._registry[Appointment]

        fields = model_admin.get_readonly_fields(rf.get("/"), appointment)

        assert "patient" not in fields
        assert "paid_amount" in fields

    def test_patient_locked_once_paid(self, rf, appointment):
        PaymentTransactionFactory(appointment=appointment)
        model_admin = site._registry[Appointment]

        fields = model_admin.get_readonly_fields(rf.get("/"), appointment)

        assert "patient" in fields
        assert "paid_amount" in fields

    def test_patient_editable_on_add(self, rf, db):
        model_admin = site._registry[Appointment]

        assert "patient" not in model_admin.get_readonly_fields(rf.get("/"))
