# dental_core/audit/models.py
import uuid

from django.db import models


class AuditEntry(models.Model):
    """
    Append-only audit record. Written in the same atomic unit as the change it describes;
    never updated or deleted.

    tenant_id is null only for platform-level entries that have no owning tenant.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(null=True, blank=True, db_index=True)

    subject_type = models.CharField(max_length=64, db_index=True)  # e.g. "prescription"
    subject_id = models.UUIDField(db_index=True)

    action = models.CharField(max_length=128, db_index=True)  # e.g. "prescription.filled"
    from_state = models.CharField(max_length=32, blank=True, default="")
    to_state = models.CharField(max_length=32, blank=True, default="")

    actor_user_id = models.BigIntegerField(null=True, blank=True, db_index=True)
    reason = models.CharField(max_length=500, blank=True, default="")

    metadata = models.JSONField(default=dict, blank=True)
    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "audit_audit_entry"
        indexes = [
            models.Index(fields=["tenant_id", "occurred_at"], name="audit_tenant_time_idx"),
            models.Index(fields=["subject_type", "subject_id"], name="audit_subject_idx"),
            models.Index(fields=["tenant_id", "action"], name="audit_tenant_action_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("AuditEntry is append-only.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("AuditEntry is append-only.")

    def __str__(self) -> str:
        return f"{self.action} {self.subject_type}:{self.subject_id}"
