"""
Serializers for the clinic API.

Serializers:
    PatientSerializer: Patient CRUD
    AppointmentSerializer: Appointment CRUD (paid_amount is read-only)
    PriceListItemSerializer: Price list CRUD
    TreatmentItemSerializer: Plan line with computed line_total
    TreatmentPlanSerializer: Plan with nested read-only items and total
    AddTreatmentItemSerializer: Input for adding a price list entry to a plan
    ApplyDiscountSerializer: Input for discounting a plan
"""

from __future__ import annotations

from datetime import date

from django.utils import timezone
from rest_framework import serializers

from clinic.models import (
    Appointment,
    Patient,
    PriceListItem,
    TreatmentItem,
    TreatmentPlan,
)
from core.exceptions import ConflictError

PHONE_PATTERN = r"^\+?[\d\s\-\(\)]+$"


class PatientSerializer(serializers.ModelSerializer):
    phone = serializers.RegexField(
        PHONE_PATTERN,
        max_length=30,
        error_messages={"invalid": "Invalid phone number format."},
    )

    class Meta:
        model = Patient
        fields = [
            "id",
            "full_name",
            "phone",
            "email",
            "gender",
            "date_of_birth",
            "address",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class AppointmentSerializer(serializers.ModelSerializer):
    """
    Serializer for Appointment.

    paid_amount is exposed for display only; it is recomputed from the
    payments ledger and cannot be set through the API. Once payments are
    linked, the appointment cannot be reassigned to another patient (409).
    """

    patient_name = serializers.CharField(source="patient.full_name", read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id",
            "patient",
            "patient_name",
            "date",
            "start_time",
            "end_time",
            "status",
            "notes",
            "paid_amount",
            "created_at",
        ]
        read_only_fields = ["id", "paid_amount", "created_at"]

    def validate_patient(self, value: Patient) -> Patient:
        # Linked ledger rows are bound to the appointment's patient.
        instance = self.instance
        if (
            instance is not None
            and value.pk != instance.patient_id
            and instance.payments.exists()
        ):
            raise ConflictError(
                "Appointment has recorded payments and cannot be moved to "
                "another patient.",
                error_code="HAS_PAYMENTS",
                details={"id": str(instance.pk)},
            )
        return value

    def validate_date(self, value: date) -> date:
        # Only new bookings must be in the future; past visits stay editable.
        if self.instance is None and value < timezone.localdate():
            raise serializers.ValidationError("Appointment date cannot be in the past.")
        return value

    def validate(self, attrs):
        start_time = attrs.get("start_time", getattr(self.instance, "start_time", None))
        end_time = attrs.get("end_time", getattr(self.instance, "end_time", None))
        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError(
                {"end_time": "End time must be after start time."}
            )
        return attrs


class PriceListItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PriceListItem
        fields = ["id", "name", "description", "default_price", "is_active"]
        read_only_fields = ["id"]


class TreatmentItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(
        max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = TreatmentItem
        fields = [
            "id",
            "price_list_item",
            "name_snapshot",
            "price_snapshot",
            "quantity",
            "line_total",
        ]
        read_only_fields = fields


class TreatmentPlanSerializer(serializers.ModelSerializer):
    items = TreatmentItemSerializer(many=True, read_only=True)
    total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = TreatmentPlan
        fields = ["id", "patient", "title", "notes", "items", "total", "created_at"]
        read_only_fields = ["id", "items", "total", "created_at"]


class AddTreatmentItemSerializer(serializers.Serializer):
    price_list_item = serializers.PrimaryKeyRelatedField(
        queryset=PriceListItem.objects.all()
    )
    quantity = serializers.IntegerField(min_value=1, default=1)


class ApplyDiscountSerializer(serializers.Serializer):
    """Input for POST /treatment-plans/{id}/apply-discount/."""

    kind = serializers.ChoiceField(choices=["percentage", "fixed"])
    value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
