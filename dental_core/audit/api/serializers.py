# dental_core/audit/api/serializers.py
from rest_framework import serializers

from dental_core.audit.models import AuditEntry


class AuditEntrySerializer(serializers.ModelSerializer):
    # Keep API field name "timestamp", mapped to the model field "occurred_at"
    timestamp = serializers.DateTimeField(source="occurred_at", read_only=True)

    class Meta:
        model = AuditEntry
        fields = [
            "id",
            "tenant_id",
            "subject_type",
            "subject_id",
            "action",
            "from_state",
            "to_state",
            "actor_user_id",
            "reason",
            "timestamp",
            "metadata",
        ]
        read_only_fields = fields
