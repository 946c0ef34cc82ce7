# dental_core/audit/services.py
from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction

from dental_core.audit.models import AuditEntry


class AuditService:
    """
    Central audit writer. Callers invoke it inside their own transaction.atomic block,
    so the entry commits or rolls back together with the change it records.
    """

    @staticmethod
    @transaction.atomic
    def log(
        *,
        action: str,
        subject_type: str,
        subject_id: UUID,
        tenant_id: UUID | None,
        actor_user_id: int | None,
        from_state: str = "",
        to_state: str = "",
        reason: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditEntry:
        return AuditEntry.objects.create(
            tenant_id=tenant_id,
            subject_type=subject_type,
            subject_id=subject_id,
            action=action,
            from_state=from_state or "",
            to_state=to_state or "",
            actor_user_id=actor_user_id,
            reason=(reason or "")[:500],
            metadata=metadata or {},
        )
