"""
Audit trail writer.

AuditService.record() is the only code path that creates AuditLog rows.
It does not open its own transaction: callers invoke it inside theirs so
that the audit entry commits or rolls back together with the change it
describes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.services import BaseService

from audit.models import AuditLog

if TYPE_CHECKING:
    from typing import Any


class AuditService(BaseService):
    """Append entries to the audit trail."""

    @classmethod
    def record(
        cls,
        *,
        entity_name: str,
        entity_id: Any,
        action: str,
        actor_id: Any = None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog:
        """
        Write one audit entry.

        Args:
            entity_name: Model name of the changed record
            entity_id: Primary key of the changed record (stored as text)
            action: AuditAction value
            actor_id: Acting user id (stored as text, empty when unknown)
            changes: JSON-serializable snapshot; Decimal/date/UUID allowed

        Returns:
            The created AuditLog
        """
        entry = AuditLog.objects.create(
            entity_name=entity_name,
            entity_id=str(entity_id),
            action=action,
            actor_id="" if actor_id is None else str(actor_id),
            changes=changes or {},
        )
        cls.get_logger().debug(
            f"Audit {action} {entity_name}:{entity_id}",
            extra={"audit_id": str(entry.id), "actor_id": entry.actor_id},
        )
        return entry
