"""
DRF serializers for the payments API.

Input serializers only check shape (types, formats). Business rules such
as positive amounts and the future-date limit are enforced by
payments.validators so that the API and direct service callers get the
same messages.

Output serializers render the dataclasses from payments.types.
"""

from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from payments.types import AddPaymentParams


class AddPaymentSerializer(serializers.Serializer):
    """
    Input for recording a payment.

    Request body:
        {
            "patient_id": "uuid",
            "appointment_id": "uuid" | null,
            "amount": "150.00",
            "payment_date": "2024-03-15",
            "notes": "Cash"
        }
    """

    patient_id = serializers.UUIDField()
    appointment_id = serializers.UUIDField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=None, decimal_places=None)
    payment_date = serializers.DateField()
    notes = serializers.CharField(
        required=False, allow_blank=True, default="", trim_whitespace=True
    )

    def to_params(self) -> AddPaymentParams:
        data = self.validated_data
        return AddPaymentParams(
            patient_id=data["patient_id"],
            amount=data["amount"],
            payment_date=data["payment_date"],
            appointment_id=data.get("appointment_id"),
            notes=data.get("notes", ""),
        )


class PaymentRecordSerializer(serializers.Serializer):
    """Output serializer for PaymentRecord."""

    id = serializers.UUIDField(read_only=True)
    patient_id = serializers.UUIDField(read_only=True)
    patient_name = serializers.CharField(read_only=True)
    appointment_id = serializers.UUIDField(read_only=True, allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    payment_date = serializers.DateField(read_only=True)
    notes = serializers.CharField(read_only=True)
    created_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    created_by_name = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class OutstandingBalanceSerializer(serializers.Serializer):
    """A patient's balance without payment history."""

    patient_id = serializers.UUIDField(read_only=True)
    patient_name = serializers.CharField(read_only=True)
    total_cost = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    total_paid = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    remaining_balance = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )


class PatientPaymentSummarySerializer(OutstandingBalanceSerializer):
    """A patient's balance with full payment history."""

    payments = PaymentRecordSerializer(many=True, read_only=True)


class DateRangeSerializer(serializers.Serializer):
    """Optional inclusive date range from query parameters."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start_date = attrs.get("start_date")
        end_date = attrs.get("end_date")
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError(
                {"end_date": "End date cannot be before start date."}
            )
        return attrs


class YearSerializer(serializers.Serializer):
    """Report year from query parameters; defaults to the current year."""

    year = serializers.IntegerField(required=False, min_value=1900, max_value=9999)

    def validate(self, attrs):
        attrs.setdefault("year", timezone.localdate().year)
        return attrs


class RevenueSerializer(serializers.Serializer):
    start_date = serializers.DateField(read_only=True, allow_null=True)
    end_date = serializers.DateField(read_only=True, allow_null=True)
    total_revenue = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )


class MonthlyRevenueSerializer(serializers.Serializer):
    year = serializers.IntegerField(read_only=True)
    months = serializers.DictField(
        child=serializers.DecimalField(max_digits=12, decimal_places=2),
        read_only=True,
    )


class FinancialReportSerializer(serializers.Serializer):
    """Output serializer for FinancialReport."""

    year = serializers.IntegerField(read_only=True)
    total_revenue = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )
    revenue_this_month = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )
    outstanding_total = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )
    outstanding_patient_count = serializers.IntegerField(read_only=True)
    monthly_revenue = serializers.DictField(
        child=serializers.DecimalField(max_digits=12, decimal_places=2),
        read_only=True,
    )
    recent_payments = PaymentRecordSerializer(many=True, read_only=True)


class ReconciliationResultSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField(read_only=True)
    appointments_checked = serializers.IntegerField(read_only=True)
    appointments_changed = serializers.IntegerField(read_only=True)
