import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Patient",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("full_name", models.CharField(help_text="Patient's full name", max_length=100)),
                ("phone", models.CharField(help_text="Contact phone number", max_length=30)),
                ("email", models.EmailField(blank=True, help_text="Optional contact email", max_length=254)),
                (
                    "gender",
                    models.CharField(
                        choices=[("male", "Male"), ("female", "Female")],
                        help_text="Patient's gender",
                        max_length=10,
                    ),
                ),
                ("date_of_birth", models.DateField(blank=True, help_text="Date of birth", null=True)),
                ("address", models.CharField(blank=True, help_text="Postal address", max_length=255)),
                (
                    "is_active",
                    models.BooleanField(
                        db_index=True,
                        default=True,
                        help_text="Inactive patients are hidden from balance follow-up",
                    ),
                ),
            ],
            options={
                "verbose_name": "patient",
                "verbose_name_plural": "patients",
                "ordering": ["full_name"],
            },
        ),
        migrations.CreateModel(
            name="PriceListItem",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(help_text="Procedure name", max_length=200)),
                ("description", models.TextField(blank=True, help_text="Optional description")),
                (
                    "default_price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Price copied onto treatment items when they are added",
                        max_digits=12,
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Inactive items cannot be added to new plans",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(default_price__gte=0),
                        name="price_list_item_price_non_negative",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Appointment",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("date", models.DateField(db_index=True, help_text="Day of the appointment")),
                ("start_time", models.TimeField(help_text="Start time")),
                ("end_time", models.TimeField(help_text="End time")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                            ("no_show", "No show"),
                        ],
                        db_index=True,
                        default="scheduled",
                        help_text="Appointment status",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True, help_text="Free-form notes")),
                (
                    "paid_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        editable=False,
                        help_text="Sum of payments linked to this appointment (maintained by reconciliation)",
                        max_digits=12,
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        help_text="Patient the appointment is booked for",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="appointments",
                        to="clinic.patient",
                    ),
                ),
            ],
            options={
                "verbose_name": "appointment",
                "verbose_name_plural": "appointments",
                "ordering": ["-date", "-start_time"],
                "indexes": [
                    models.Index(
                        fields=["patient", "date"], name="appointment_patient_date_idx"
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(end_time__gt=models.F("start_time")),
                        name="appointment_end_after_start",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="TreatmentPlan",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "title",
                    models.CharField(
                        blank=True,
                        help_text="Short description of the plan",
                        max_length=200,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                (
                    "patient",
                    models.ForeignKey(
                        help_text="Patient the plan belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="treatment_plans",
                        to="clinic.patient",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="TreatmentItem",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "name_snapshot",
                    models.CharField(
                        help_text="Procedure name at the time it was added",
                        max_length=200,
                    ),
                ),
                (
                    "price_snapshot",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price at the time it was added (after discounts)",
                        max_digits=12,
                    ),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(default=1, help_text="Number of units"),
                ),
                (
                    "plan",
                    models.ForeignKey(
                        help_text="Plan this line belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="clinic.treatmentplan",
                    ),
                ),
                (
                    "price_list_item",
                    models.ForeignKey(
                        blank=True,
                        help_text="Source price list entry",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="treatment_items",
                        to="clinic.pricelistitem",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gte=1),
                        name="treatment_item_quantity_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(price_snapshot__gte=0),
                        name="treatment_item_price_non_negative",
                    ),
                ],
            },
        ),
    ]
