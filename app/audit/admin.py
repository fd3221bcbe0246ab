"""
Django admin configuration for the audit trail.

Audit entries are immutable: no add, change or delete permissions.
"""

from django.contrib import admin

from audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["timestamp", "action", "entity_name", "entity_id", "actor_id"]
    list_filter = ["action", "entity_name", "timestamp"]
    search_fields = ["entity_id", "actor_id"]
    readonly_fields = [
        "id",
        "timestamp",
        "entity_name",
        "entity_id",
        "action",
        "actor_id",
        "changes",
    ]
    date_hierarchy = "timestamp"
    ordering = ["-timestamp"]

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
