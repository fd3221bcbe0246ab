"""
Celery configuration for the clinic payments service.

Celery runs the ledger maintenance tasks in payments.tasks, including the
nightly sweep that rebuilds appointment paid amounts from the payment
ledger. The schedule lives in the database (django-celery-beat).

Redis is both the message broker and result backend. Tasks are
auto-discovered from all installed Django apps.

Usage:
    from payments.tasks import recalculate_patient_payment_totals

    recalculate_patient_payment_totals.delay(str(patient.id))
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Looks for a tasks.py module in each installed app
app.autodiscover_tasks()
