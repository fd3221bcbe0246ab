"""
Tests for the User model and UserManager.
"""

import pytest

from authentication.models import User, UserRole
from authentication.tests.factories import UserFactory


@pytest.mark.django_db
class TestUserManager:
    """Tests for email-based user creation."""

    def test_create_user_normalizes_email(self):
        user = User.objects.create_user(email="Front@CLINIC.example", password="x1y2z3")

        assert user.email == "Front@clinic.example"
        assert user.check_password("x1y2z3")
        assert user.role == UserRole.RECEPTIONIST

    def test_create_user_without_password_is_unusable(self):
        user = User.objects.create_user(email="nopass@clinic.example")

        assert not user.has_usable_password()

    def test_create_user_requires_email(self):
        with pytest.raises(ValueError, match="Email"):
            User.objects.create_user(email="")

    def test_create_superuser_is_system_admin(self, superuser):
        assert superuser.is_staff
        assert superuser.is_superuser
        assert superuser.role == UserRole.SYSTEM_ADMIN
        assert superuser.is_system_admin

    def test_create_superuser_rejects_non_staff(self):
        with pytest.raises(ValueError, match="is_staff"):
            User.objects.create_superuser(
                email="bad@clinic.example", password="x", is_staff=False
            )


@pytest.mark.django_db
class TestUserDisplayName:
    """Tests for name helpers used as the actor display name."""

    def test_full_name(self):
        user = UserFactory(first_name="Ana", last_name="Petrova")

        assert user.get_full_name() == "Ana Petrova"

    def test_full_name_falls_back_to_email(self):
        user = UserFactory(first_name="", last_name="")

        assert user.get_full_name() == user.email

    def test_role_flags(self):
        doctor = UserFactory(role=UserRole.DOCTOR)

        assert doctor.is_doctor
        assert not doctor.is_system_admin
