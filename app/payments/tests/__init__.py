"""
Tests for payments app.

This package contains test modules for:
- test_models.py: PaymentTransaction constraints
- test_validators.py: Payment input validation
- test_services.py: Add/delete units of work and ledger reads
- test_reconciler.py: Paid amount recalculation
- test_reports.py: Summaries, outstanding balances, revenue
- test_tasks.py: Celery task tests
- test_views.py: API endpoint tests
- test_integration.py: Full payment lifecycle

Usage:
    pytest app/payments/tests/
    pytest app/payments/tests/test_services.py
"""
