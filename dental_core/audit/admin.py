# dental_core/audit/admin.py
from django.contrib import admin

from dental_core.audit.models import AuditEntry


@admin.register(AuditEntry)
class AuditEntryAdmin(admin.ModelAdmin):
    list_display = (
        "action",
        "subject_type",
        "subject_id",
        "tenant_id",
        "from_state",
        "to_state",
        "actor_user_id",
        "occurred_at",
    )
    list_filter = ("action", "subject_type")
    search_fields = ("action", "subject_type", "subject_id", "reason")
    ordering = ("-occurred_at",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
