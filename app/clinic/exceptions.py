"""
Clinic lookup exceptions.

Exception Hierarchy:
    NotFoundError (core)
    ├── PatientNotFound
    └── AppointmentNotFound

Usage:
    from clinic.exceptions import PatientNotFound

    raise PatientNotFound(
        "Patient not found.",
        details={"patient_id": str(patient_id)},
    )
"""

from core.exceptions import NotFoundError


class PatientNotFound(NotFoundError):
    """Raised when a patient id does not resolve to a patient."""

    default_error_code: str = "PATIENT_NOT_FOUND"


class AppointmentNotFound(NotFoundError):
    """Raised when an appointment id does not resolve to an appointment."""

    default_error_code: str = "APPOINTMENT_NOT_FOUND"
