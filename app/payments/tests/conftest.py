"""
Pytest fixtures for payment tests.

Usage:
    def test_balance(patient_with_plan, appointment):
        payment_service.add_payment(make_params(patient_with_plan, "400.00", appointment))
"""

from decimal import Decimal

import pytest

from clinic.tests.factories import (
    AppointmentFactory,
    PatientFactory,
    TreatmentItemFactory,
)


@pytest.fixture
def patient(db):
    return PatientFactory(full_name="Jane Roe")


@pytest.fixture
def patient_with_plan(patient):
    """Patient whose treatment plans cost 1000.00 in total."""
    TreatmentItemFactory(plan__patient=patient, price_snapshot=Decimal("400.00"), quantity=2)
    TreatmentItemFactory(plan__patient=patient, price_snapshot=Decimal("200.00"))
    return patient


@pytest.fixture
def appointment(patient):
    return AppointmentFactory(patient=patient)


@pytest.fixture
def other_appointment(patient):
    return AppointmentFactory(patient=patient)


@pytest.fixture
def other_patient(db):
    return PatientFactory(full_name="Alex Doe")


@pytest.fixture
def staff_client(api_client, receptionist):
    api_client.force_authenticate(receptionist)
    return api_client


@pytest.fixture
def doctor_client(api_client, doctor):
    api_client.force_authenticate(doctor)
    return api_client


@pytest.fixture
def admin_client(api_client, system_admin):
    api_client.force_authenticate(system_admin)
    return api_client
