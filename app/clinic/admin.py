"""
Django admin configuration for clinic models.

paid_amount is shown read-only everywhere; the patient admin offers an
action that rebuilds it from the payments ledger. An appointment's patient
is locked once payments are linked to it.
"""

from django.contrib import admin, messages

from clinic.models import (
    Appointment,
    Patient,
    PriceListItem,
    TreatmentItem,
    TreatmentPlan,
)


class AppointmentInline(admin.TabularInline):
    model = Appointment
    extra = 0
    fields = ("date", "start_time", "end_time", "status", "paid_amount")
    readonly_fields = ("paid_amount",)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("full_name", "phone", "gender", "is_active", "created_at")
    list_filter = ("is_active", "gender")
    search_fields = ("full_name", "phone", "email")
    inlines = [AppointmentInline]
    actions = ["recalculate_payment_totals"]

    @admin.action(description="Recalculate payment totals")
    def recalculate_payment_totals(self, request, queryset):
        from payments.reconciler import reconciler

        changed = 0
        for patient in queryset:
            result = reconciler.recalculate_payment_totals(patient.id)
            changed += result.appointments_changed

        self.message_user(
            request,
            f"Recalculated {queryset.count()} patient(s); "
            f"{changed} appointment(s) corrected.",
            messages.SUCCESS,
        )


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("patient", "date", "start_time", "status", "paid_amount")
    list_filter = ("status", "date")
    search_fields = ("patient__full_name",)
    readonly_fields = ("paid_amount", "created_at", "updated_at")
    raw_id_fields = ("patient",)

    def get_readonly_fields(self, request, obj=None):
        fields = super().get_readonly_fields(request, obj)
        if obj is not None and obj.payments.exists():
            return (*fields, "patient")
        return fields


@admin.register(PriceListItem)
class PriceListItemAdmin(admin.ModelAdmin):
    list_display = ("name", "default_price", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)


class TreatmentItemInline(admin.TabularInline):
    model = TreatmentItem
    extra = 0
    fields = ("price_list_item", "name_snapshot", "price_snapshot", "quantity")


@admin.register(TreatmentPlan)
class TreatmentPlanAdmin(admin.ModelAdmin):
    list_display = ("__str__", "patient", "created_at")
    search_fields = ("title", "patient__full_name")
    raw_id_fields = ("patient",)
    inlines = [TreatmentItemInline]
