"""
Audit trail models.

AuditLog rows are written once and never modified. Corrections to the
underlying data produce new rows, not edits to old ones.
"""

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin


class AuditAction(models.TextChoices):
    """Action tags recorded for ledger mutations."""

    PAYMENT_ADDED = "PAYMENT_ADDED", "Payment added"
    PAYMENT_DELETED = "PAYMENT_DELETED", "Payment deleted"


class AuditLog(UUIDPrimaryKeyMixin, models.Model):
    """
    One audit entry per ledger mutation.

    Fields:
        entity_name: Model name of the changed record (e.g. "PaymentTransaction")
        entity_id: Primary key of the changed record, as text
        action: What happened (PAYMENT_ADDED / PAYMENT_DELETED)
        actor_id: Identifier of the user who made the change, as text
        timestamp: When the entry was written
        changes: JSON snapshot of the change payload. Decimals, dates and
            UUIDs are stored as strings by DjangoJSONEncoder.
    """

    entity_name = models.CharField(
        max_length=100,
        help_text="Model name of the changed record",
    )
    entity_id = models.CharField(
        max_length=64,
        db_index=True,
        help_text="Primary key of the changed record",
    )
    action = models.CharField(
        max_length=50,
        choices=AuditAction.choices,
        db_index=True,
        help_text="Action tag",
    )
    actor_id = models.CharField(
        max_length=64,
        blank=True,
        help_text="Identifier of the acting user",
    )
    timestamp = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the change was recorded",
    )
    changes = models.JSONField(
        default=dict,
        blank=True,
        encoder=DjangoJSONEncoder,
        help_text="Snapshot of the change payload",
    )

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["entity_name", "entity_id"], name="audit_entity_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.entity_name}:{self.entity_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Audit log entries are append-only and cannot be modified.")
        super().save(*args, **kwargs)
