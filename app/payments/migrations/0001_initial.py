import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("clinic", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentTransaction",
            fields=[
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
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount received",
                        max_digits=12,
                    ),
                ),
                (
                    "payment_date",
                    models.DateField(db_index=True, help_text="Date the payment was made"),
                ),
                (
                    "notes",
                    models.CharField(blank=True, help_text="Optional notes", max_length=500),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        help_text="When the payment was recorded",
                    ),
                ),
                (
                    "sequence",
                    models.PositiveIntegerField(
                        editable=False,
                        help_text="Per-patient insertion order",
                    ),
                ),
                (
                    "appointment",
                    models.ForeignKey(
                        blank=True,
                        help_text="Appointment this payment is for (empty for patient-level credit)",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="clinic.appointment",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who recorded the payment",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="recorded_payments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        help_text="Patient who made the payment",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="clinic.patient",
                    ),
                ),
            ],
            options={
                "ordering": ["-payment_date", "sequence"],
                "indexes": [
                    models.Index(
                        fields=["patient", "payment_date"],
                        name="payment_patient_date_idx",
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="payment_amount_positive",
                    ),
                    models.UniqueConstraint(
                        fields=("patient", "sequence"),
                        name="payment_patient_sequence_unique",
                    ),
                ],
            },
        ),
    ]
