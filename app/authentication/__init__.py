"""
Authentication application.

This app provides clinic staff accounts, JWT login and role-based
permissions for the clinic and payments APIs.

Key components:
    - User model: Custom email-based user with a clinic role
    - Permission classes: IsClinicStaff, IsDoctorOrAdmin, IsSystemAdmin
    - UserService: Actor display-name resolution

Usage:
    from authentication.models import User, UserRole
    from authentication.permissions import IsSystemAdmin
"""
