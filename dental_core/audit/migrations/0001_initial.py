import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("subject_type", models.CharField(db_index=True, max_length=64)),
                ("subject_id", models.UUIDField(db_index=True)),
                ("action", models.CharField(db_index=True, max_length=128)),
                ("from_state", models.CharField(blank=True, default="", max_length=32)),
                ("to_state", models.CharField(blank=True, default="", max_length=32)),
                ("actor_user_id", models.BigIntegerField(blank=True, db_index=True, null=True)),
                ("reason", models.CharField(blank=True, default="", max_length=500)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("occurred_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "db_table": "audit_audit_entry",
                "indexes": [
                    models.Index(fields=["tenant_id", "occurred_at"], name="audit_tenant_time_idx"),
                    models.Index(fields=["subject_type", "subject_id"], name="audit_subject_idx"),
                    models.Index(fields=["tenant_id", "action"], name="audit_tenant_action_idx"),
                ],
            },
        ),
    ]
