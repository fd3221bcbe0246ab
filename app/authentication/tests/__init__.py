"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User model and manager tests
- test_permissions.py: Role-based permission classes
- test_services.py: Actor display-name resolution

Usage:
    pytest app/authentication/tests/
"""
