"""
Test configuration and fixtures for authentication tests.

Role fixtures (receptionist, doctor, system_admin) and api_client live in
the root conftest.
"""

import pytest

from authentication.models import User


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(
        email="admin@clinic.example", password="AdminPass123!"
    )
