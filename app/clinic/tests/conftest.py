"""
Pytest fixtures for clinic tests.
"""

from decimal import Decimal

import pytest

from clinic.tests.factories import (
    AppointmentFactory,
    PatientFactory,
    PriceListItemFactory,
    TreatmentPlanFactory,
)


@pytest.fixture
def patient(db):
    return PatientFactory(full_name="Jane Roe")


@pytest.fixture
def appointment(patient):
    return AppointmentFactory(patient=patient)


@pytest.fixture
def price_list_item(db):
    return PriceListItemFactory(name="Filling", default_price=Decimal("150.00"))


@pytest.fixture
def treatment_plan(patient):
    return TreatmentPlanFactory(patient=patient)
