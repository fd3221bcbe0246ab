"""
Celery tasks for payment ledger maintenance.

This module provides async tasks for:
- Recalculating appointment paid amounts for one patient
- Nightly recalculation sweep over all patients

Usage:
    from payments.tasks import recalculate_patient_payment_totals

    # Queue a repair for one patient
    recalculate_patient_payment_totals.delay(str(patient_id))

    # Full sweep (typically via celery-beat)
    from payments.tasks import recalculate_all_payment_totals
    recalculate_all_payment_totals.delay()
"""

from __future__ import annotations

import logging
from uuid import UUID

from celery import shared_task

from clinic.exceptions import PatientNotFound
from payments.reconciler import PaymentReconciler

logger = logging.getLogger(__name__)


@shared_task
def recalculate_patient_payment_totals(patient_id: str) -> dict:
    """
    Recalculate paid amounts for one patient's appointments.

    Args:
        patient_id: UUID of the patient

    Returns:
        Dict with status and the number of appointments corrected
    """
    if isinstance(patient_id, str):
        patient_id = UUID(patient_id)

    try:
        result = PaymentReconciler.recalculate_payment_totals(patient_id)
    except PatientNotFound:
        logger.warning(
            "Patient not found for payment recalculation",
            extra={"patient_id": str(patient_id)},
        )
        return {"status": "not_found", "patient_id": str(patient_id)}

    return {
        "status": "completed",
        "patient_id": str(patient_id),
        "appointments_checked": result.appointments_checked,
        "appointments_changed": result.appointments_changed,
    }


@shared_task
def recalculate_all_payment_totals() -> dict:
    """
    Periodic task to recalculate paid amounts for every patient.

    Scheduled via celery-beat, daily at 02:00. Failures for individual
    patients are logged and skipped.

    Returns:
        Dict with the number of patients processed
    """
    logger.info("Starting payment totals recalculation sweep")

    processed = PaymentReconciler.recalculate_all()

    return {"status": "completed", "processed": processed}
