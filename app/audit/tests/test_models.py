"""
Tests for the append-only AuditLog model and AuditService.
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest

from audit.models import AuditAction, AuditLog
from audit.services import AuditService


@pytest.mark.django_db
class TestAuditService:

    def test_record_serializes_snapshot(self):
        payment_id = uuid.uuid4()

        entry = AuditService.record(
            entity_name="PaymentTransaction",
            entity_id=payment_id,
            action=AuditAction.PAYMENT_ADDED,
            actor_id=7,
            changes={
                "payment_id": payment_id,
                "amount": Decimal("150.50"),
                "payment_date": date(2024, 3, 1),
            },
        )

        entry.refresh_from_db()
        assert entry.entity_id == str(payment_id)
        assert entry.actor_id == "7"
        assert entry.changes == {
            "payment_id": str(payment_id),
            "amount": "150.50",
            "payment_date": "2024-03-01",
        }

    def test_missing_actor_stored_as_empty(self):
        entry = AuditService.record(
            entity_name="PaymentTransaction",
            entity_id="x",
            action=AuditAction.PAYMENT_DELETED,
        )

        assert entry.actor_id == ""
        assert entry.changes == {}


@pytest.mark.django_db
class TestAuditLogImmutability:

    def test_update_refused(self):
        entry = AuditService.record(
            entity_name="PaymentTransaction",
            entity_id="x",
            action=AuditAction.PAYMENT_ADDED,
        )
        entry.action = AuditAction.PAYMENT_DELETED

        with pytest.raises(ValueError, match="append-only"):
            entry.save()

        assert AuditLog.objects.get(pk=entry.pk).action == AuditAction.PAYMENT_ADDED
