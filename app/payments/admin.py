"""
Payment admin configuration.

The ledger is read-only in the admin. Payments are recorded and deleted
through the API so that paid amounts and the audit trail stay in step.
"""

from django.contrib import admin

from payments.models import PaymentTransaction


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    """Read-only view of the payment ledger."""

    list_display = [
        "id",
        "patient",
        "appointment",
        "amount",
        "payment_date",
        "created_by",
        "created_at",
    ]
    list_filter = ["payment_date"]
    search_fields = ["id", "patient__full_name", "notes"]
    readonly_fields = [
        "id",
        "patient",
        "appointment",
        "amount",
        "payment_date",
        "notes",
        "created_by",
        "created_at",
        "sequence",
    ]
    ordering = ["-payment_date", "sequence"]
    date_hierarchy = "payment_date"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
