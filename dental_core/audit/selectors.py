# dental_core/audit/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from dental_core.audit.models import AuditEntry


def list_audit_entries(
    *,
    tenant_id: UUID | None = None,
    subject_type: str | None = None,
    subject_id: UUID | None = None,
    action: str | None = None,
    actor_user_id: int | None = None,
) -> QuerySet[AuditEntry]:
    qs = AuditEntry.objects.all()

    if tenant_id:
        qs = qs.filter(tenant_id=tenant_id)
    if subject_type:
        qs = qs.filter(subject_type=subject_type)
    if subject_id:
        qs = qs.filter(subject_id=subject_id)
    if action:
        qs = qs.filter(action=action)
    if actor_user_id is not None:
        qs = qs.filter(actor_user_id=actor_user_id)

    return qs.order_by("-occurred_at", "-id")
