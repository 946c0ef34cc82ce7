import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("patients", "0001_initial"),
        ("appointments", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Prescription",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("doctor_user_id", models.BigIntegerField(blank=True, db_index=True, null=True)),
                ("medications", models.JSONField(default=list)),
                ("medications_version", models.PositiveSmallIntegerField(default=1)),
                ("instructions", models.TextField(blank=True)),
                ("valid_until", models.DateField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("FILLED", "Filled"), ("CANCELLED", "Cancelled")],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("dispensed_at", models.DateTimeField(blank=True, null=True)),
                ("dispensed_by_user_id", models.BigIntegerField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_by_user_id", models.BigIntegerField(blank=True, null=True)),
                ("cancel_reason", models.CharField(blank=True, max_length=500)),
                (
                    "appointment",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="prescriptions",
                        to="appointments.appointment",
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="prescriptions",
                        to="patients.patient",
                    ),
                ),
            ],
            options={
                "db_table": "prescriptions_prescription",
                "indexes": [
                    models.Index(fields=["tenant_id", "patient", "created_at"], name="rx_tenant_patient_idx"),
                    models.Index(fields=["tenant_id", "status", "created_at"], name="rx_tenant_status_idx"),
                ],
            },
        ),
    ]
