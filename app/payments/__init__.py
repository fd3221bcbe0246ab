"""
Payments app: the clinic's payment ledger.

This app handles:
- Recording and deleting patient payments
- Keeping Appointment.paid_amount in line with the ledger
- Patient balances and outstanding balance lists
- Revenue totals and monthly breakdowns

Related apps:
    - clinic: Patients, appointments and treatment plan costs
    - audit: Append-only log of ledger mutations
    - authentication: Users recording payments

Usage:
    from payments.services import payment_service
    from payments.types import AddPaymentParams

    record = payment_service.add_payment(
        AddPaymentParams(patient_id=patient.id, amount=Decimal("100.00"), payment_date=today),
        actor_id=user.id,
    )
    summary = payment_service.get_patient_payment_summary(patient.id)
"""
