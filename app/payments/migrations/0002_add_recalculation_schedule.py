"""
Add celery-beat schedule for the nightly payment totals sweep.

This migration creates the periodic task schedule for the
recalculate_all_payment_totals task, which runs daily at 02:00 and
repairs any appointment paid amount that has drifted from the ledger.
"""

from django.db import migrations

TASK_NAME = "Recalculate Payment Totals"


def create_periodic_task(apps, schema_editor):
    """Create the periodic task for recalculating payment totals."""
    CrontabSchedule = apps.get_model("django_celery_beat", "CrontabSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    # Daily at 02:00
    schedule, _ = CrontabSchedule.objects.get_or_create(
        minute="0",
        hour="2",
        day_of_week="*",
        day_of_month="*",
        month_of_year="*",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "payments.tasks.recalculate_all_payment_totals",
            "crontab": schedule,
            "enabled": True,
            "description": (
                "Rebuilds appointment paid amounts from the payment ledger "
                "for every patient."
            ),
        },
    )


def remove_periodic_task(apps, schema_editor):
    """Remove the periodic task on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("payments", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
