import uuid

import django.core.serializers.json
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLog",
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
                    "entity_name",
                    models.CharField(
                        help_text="Model name of the changed record", max_length=100
                    ),
                ),
                (
                    "entity_id",
                    models.CharField(
                        db_index=True,
                        help_text="Primary key of the changed record",
                        max_length=64,
                    ),
                ),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("PAYMENT_ADDED", "Payment added"),
                            ("PAYMENT_DELETED", "Payment deleted"),
                        ],
                        db_index=True,
                        help_text="Action tag",
                        max_length=50,
                    ),
                ),
                (
                    "actor_id",
                    models.CharField(
                        blank=True,
                        help_text="Identifier of the acting user",
                        max_length=64,
                    ),
                ),
                (
                    "timestamp",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="When the change was recorded",
                    ),
                ),
                (
                    "changes",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        help_text="Snapshot of the change payload",
                    ),
                ),
            ],
            options={
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(
                        fields=["entity_name", "entity_id"], name="audit_entity_idx"
                    )
                ],
            },
        ),
    ]
