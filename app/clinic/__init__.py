"""
Clinic application.

Patients, appointments, the price list and treatment plans. These are the
records the payments ledger hangs off: payments belong to a patient and may
reference one of the patient's appointments, and treatment plan line totals
are what a patient owes.

Key components:
    - Patient, Appointment, PriceListItem, TreatmentPlan, TreatmentItem
    - PatientService, AppointmentService, TreatmentPlanService
    - PercentageDiscount, FixedDiscount: price adjustments for plan items

Note:
    Appointment.paid_amount is owned by payments.reconciler. Nothing in this
    app writes it; see Appointment.save().

Usage:
    from clinic.models import Patient, Appointment
    from clinic.services import TreatmentPlanService
"""
