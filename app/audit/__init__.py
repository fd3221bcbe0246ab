"""
Audit application.

Append-only record of who changed which ledger entry and when. The ledger
writes to it inside the same transaction as the change itself and never
reads it back; it exists for external inspection (admin, exports).

Usage:
    from audit.services import AuditService
    from audit.models import AuditAction

    AuditService.record(
        entity_name="PaymentTransaction",
        entity_id=payment.id,
        action=AuditAction.PAYMENT_ADDED,
        actor_id=user.id,
        changes={"amount": payment.amount},
    )
"""
