import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=30, unique=True)),
                ("full_name", models.CharField(max_length=255)),
            ],
            options={
                "ordering": ["full_name"],
            },
        ),
        migrations.CreateModel(
            name="LabRequest",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=30, unique=True)),
                ("type", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[("requested", "Requested"), ("completed", "Completed"), ("canceled", "Canceled")],
                        db_index=True,
                        default="requested",
                        max_length=20,
                    ),
                ),
                ("result", models.TextField(blank=True, null=True)),
                ("notes", models.JSONField(blank=True, default=list)),
                ("requested_on", models.DateTimeField(default=django.utils.timezone.now)),
                ("completed_on", models.DateTimeField(blank=True, null=True)),
                ("canceled_on", models.DateTimeField(blank=True, null=True)),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="labs",
                        to="lab_requests.patient",
                    ),
                ),
            ],
            options={
                "ordering": ["-requested_on"],
                "permissions": [
                    ("complete_lab", "Can complete lab requests"),
                    ("cancel_lab", "Can cancel lab requests"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(status="requested", completed_on__isnull=True, canceled_on__isnull=True)
                            | models.Q(
                                status="completed",
                                completed_on__isnull=False,
                                canceled_on__isnull=True,
                                result__isnull=False,
                            )
                            | models.Q(status="canceled", completed_on__isnull=True, canceled_on__isnull=False)
                        ),
                        name="lab_request_status_timestamps",
                    ),
                ],
            },
        ),
    ]
