"""
Permission classes for clinic roles.

This module provides DRF permission classes used by the clinic and
payments APIs:
- IsClinicStaff: Any active user with a clinic role
- IsDoctorOrAdmin: Doctors and system administrators (financial reports)
- IsSystemAdmin: System administrators only (ledger deletion, repair)

Role Hierarchy:
    SYSTEM_ADMIN can:
        - Everything below
        - Delete payments
        - Run payment total recalculation

    DOCTOR can:
        - Everything a receptionist can
        - View financial reports

    RECEPTIONIST can:
        - Manage patients, appointments and treatment plans
        - Record payments and view balances

Design Decisions:
    - Permissions check the role field on User, not Django groups
    - Permission classes are composable via DRF's AND logic
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from authentication.models import UserRole

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


def _has_role(request: Request, *roles: str) -> bool:
    user = request.user
    if not user or not user.is_authenticated or not user.is_active:
        return False
    return user.role in roles


class IsClinicStaff(permissions.BasePermission):
    """Allows access to any authenticated, active clinic user."""

    message = "You must be signed in as clinic staff."

    def has_permission(self, request: Request, view: APIView) -> bool:
        return _has_role(request, *UserRole.values)


class IsDoctorOrAdmin(permissions.BasePermission):
    """Allows access to doctors and system administrators."""

    message = "Only doctors and system administrators can view financial reports."

    def has_permission(self, request: Request, view: APIView) -> bool:
        return _has_role(request, UserRole.DOCTOR, UserRole.SYSTEM_ADMIN)


class IsSystemAdmin(permissions.BasePermission):
    """Allows access to system administrators only."""

    message = "Only system administrators can perform this action."

    def has_permission(self, request: Request, view: APIView) -> bool:
        return _has_role(request, UserRole.SYSTEM_ADMIN)
