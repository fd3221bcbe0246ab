"""
Clinic models.

This module defines the records the payments ledger depends on:
- Patient: A person treated at the clinic
- Appointment: A scheduled visit, carrying the cached paid_amount
- PriceListItem: A billable procedure with its default price
- TreatmentPlan / TreatmentItem: What a patient has been quoted

Related files:
    - services.py: Lookups and treatment plan operations
    - discounts.py: Price adjustments applied to treatment items
    - payments/reconciler.py: Sole writer of Appointment.paid_amount

Money:
    All monetary columns are DecimalField(max_digits=12, decimal_places=2).
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel

ZERO = Decimal("0.00")


# =============================================================================
# Choices
# =============================================================================


class Gender(models.TextChoices):
    MALE = "male", "Male"
    FEMALE = "female", "Female"


class AppointmentStatus(models.TextChoices):
    """Lifecycle of an appointment."""

    SCHEDULED = "scheduled", "Scheduled"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
    NO_SHOW = "no_show", "No show"


# =============================================================================
# Patients
# =============================================================================


class Patient(UUIDPrimaryKeyMixin, BaseModel):
    """
    A patient of the clinic.

    Fields:
        full_name: Display name used on receipts and reports
        phone: Contact number
        email: Optional contact email
        gender: Male / Female
        date_of_birth: Optional
        is_active: Inactive patients are excluded from outstanding-balance
            reports but keep their full history
    """

    full_name = models.CharField(
        max_length=100,
        help_text="Patient's full name",
    )
    phone = models.CharField(
        max_length=30,
        help_text="Contact phone number",
    )
    email = models.EmailField(
        blank=True,
        help_text="Optional contact email",
    )
    gender = models.CharField(
        max_length=10,
        choices=Gender.choices,
        help_text="Patient's gender",
    )
    date_of_birth = models.DateField(
        null=True,
        blank=True,
        help_text="Date of birth",
    )
    address = models.CharField(
        max_length=255,
        blank=True,
        help_text="Postal address",
    )
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive patients are hidden from balance follow-up",
    )

    class Meta:
        ordering = ["full_name"]
        verbose_name = "patient"
        verbose_name_plural = "patients"

    def __str__(self) -> str:
        return self.full_name


# =============================================================================
# Appointments
# =============================================================================


class Appointment(UUIDPrimaryKeyMixin, BaseModel):
    """
    A visit booked for a patient.

    paid_amount is a cached projection of the payments ledger: the sum of
    payments linked to this appointment. It is maintained exclusively by
    payments.reconciler.PaymentReconciler through bulk_update. save()
    never persists it, so forms, serializers and the admin cannot change it.
    """

    patient = models.ForeignKey(
        Patient,
        on_delete=models.CASCADE,
        related_name="appointments",
        help_text="Patient the appointment is booked for",
    )
    date = models.DateField(
        db_index=True,
        help_text="Day of the appointment",
    )
    start_time = models.TimeField(help_text="Start time")
    end_time = models.TimeField(help_text="End time")
    status = models.CharField(
        max_length=20,
        choices=AppointmentStatus.choices,
        default=AppointmentStatus.SCHEDULED,
        db_index=True,
        help_text="Appointment status",
    )
    notes = models.TextField(
        blank=True,
        help_text="Free-form notes",
    )
    paid_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=ZERO,
        editable=False,
        help_text="Sum of payments linked to this appointment (maintained by reconciliation)",
    )

    class Meta:
        ordering = ["-date", "-start_time"]
        verbose_name = "appointment"
        verbose_name_plural = "appointments"
        indexes = [
            models.Index(fields=["patient", "date"], name="appointment_patient_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="appointment_end_after_start",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.patient} on {self.date} at {self.start_time:%H:%M}"

    def save(self, *args, **kwargs):
        if self._state.adding:
            # New rows start with nothing paid; reconciliation fills it in.
            self.paid_amount = ZERO
        else:
            update_fields = kwargs.get("update_fields")
            if update_fields is None:
                update_fields = [
                    field.name
                    for field in self._meta.concrete_fields
                    if not field.primary_key
                ]
            kwargs["update_fields"] = [
                name for name in update_fields if name != "paid_amount"
            ]
        super().save(*args, **kwargs)


# =============================================================================
# Price list and treatment plans
# =============================================================================


class PriceListItem(UUIDPrimaryKeyMixin, BaseModel):
    """A billable procedure and its current default price."""

    name = models.CharField(
        max_length=200,
        help_text="Procedure name",
    )
    description = models.TextField(
        blank=True,
        help_text="Optional description",
    )
    default_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Price copied onto treatment items when they are added",
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive items cannot be added to new plans",
    )

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(default_price__gte=0),
                name="price_list_item_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.default_price})"


class TreatmentPlan(UUIDPrimaryKeyMixin, BaseModel):
    """A set of quoted procedures for a patient."""

    patient = models.ForeignKey(
        Patient,
        on_delete=models.CASCADE,
        related_name="treatment_plans",
        help_text="Patient the plan belongs to",
    )
    title = models.CharField(
        max_length=200,
        blank=True,
        help_text="Short description of the plan",
    )
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.title or f"Plan for {self.patient}"

    @property
    def total(self) -> Decimal:
        return sum((item.line_total for item in self.items.all()), ZERO)


class TreatmentItem(UUIDPrimaryKeyMixin, BaseModel):
    """
    One line on a treatment plan.

    Name and price are snapshotted from the price list when the item is
    added, so later price list changes do not alter existing plans.
    """

    plan = models.ForeignKey(
        TreatmentPlan,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Plan this line belongs to",
    )
    price_list_item = models.ForeignKey(
        PriceListItem,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="treatment_items",
        help_text="Source price list entry",
    )
    name_snapshot = models.CharField(
        max_length=200,
        help_text="Procedure name at the time it was added",
    )
    price_snapshot = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Unit price at the time it was added (after discounts)",
    )
    quantity = models.PositiveIntegerField(
        default=1,
        help_text="Number of units",
    )

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="treatment_item_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price_snapshot__gte=0),
                name="treatment_item_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name_snapshot} x{self.quantity}"

    @property
    def line_total(self) -> Decimal:
        return self.price_snapshot * self.quantity
