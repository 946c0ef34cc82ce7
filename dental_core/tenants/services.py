# dental_core/tenants/services.py
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from dental_core.audit.services import AuditService
from dental_core.common.api.exceptions import InvalidState, NotFound
from dental_core.common.events import publish_on_commit
from dental_core.tenants.models import Tenant, TenantStatus
from dental_core.tenants.settings_schema import normalize_settings

logger = logging.getLogger(__name__)


class TenantService:
    """
    Tenant creation and settings (write-model boundary).
    Status is NOT written here; see TenantLifecycleService.
    """

    @staticmethod
    @transaction.atomic
    def create(
        *,
        name: str,
        code: str,
        settings: Optional[dict] = None,
        actor_user_id: int | None = None,
    ) -> Tenant:
        code = (code or "").strip()
        name = (name or "").strip()

        if not code:
            raise ValidationError({"code": "This field is required."})
        if not name:
            raise ValidationError({"name": "This field is required."})
        if Tenant.objects.filter(code=code).exists():
            raise ValidationError({"code": "A tenant with this code already exists."})

        obj = Tenant.objects.create(
            name=name,
            code=code,
            status=TenantStatus.ACTIVE,
            settings=normalize_settings(settings),
        )

        AuditService.log(
            action="tenant.created",
            subject_type="tenant",
            subject_id=obj.id,
            tenant_id=obj.id,
            actor_user_id=actor_user_id,
            to_state=obj.status,
        )
        logger.info("tenant %s created (%s)", obj.id, obj.code)
        return obj

    @staticmethod
    @transaction.atomic
    def update_settings(*, tenant_id: UUID, settings: dict, actor_user_id: int | None = None) -> Tenant:
        t = Tenant.objects.select_for_update().filter(id=tenant_id).first()
        if t is None:
            raise NotFound("Tenant")

        incoming = dict(settings or {})
        # maintenance info is owned by the lifecycle controller
        incoming.pop("maintenance", None)
        current = t.settings or {}
        if current.get("maintenance"):
            incoming["maintenance"] = current["maintenance"]

        t.settings = normalize_settings(incoming)
        t.save(update_fields=["settings", "updated_at"])

        AuditService.log(
            action="tenant.settings_updated",
            subject_type="tenant",
            subject_id=t.id,
            tenant_id=t.id,
            actor_user_id=actor_user_id,
        )
        return t


# action -> target status
LIFECYCLE_ACTIONS = {
    "kill_switch": TenantStatus.SUSPENDED,
    "enable_maintenance": TenantStatus.MAINTENANCE,
    "disable_maintenance": None,  # restores the status recorded at enable time
    "freeze": TenantStatus.FROZEN,
    "reactivate": TenantStatus.ACTIVE,
}

# actions that refuse a blank reason
REASON_REQUIRED = frozenset({"kill_switch", "enable_maintenance", "freeze", "reactivate"})


class TenantLifecycleService:
    """
    The only writer of Tenant.status.

    Every transition locks the tenant row, checks the move, writes the new status and
    one AuditEntry in the same atomic unit. The request gate reads status straight
    from the table, so the change applies to the very next request.
    """

    @staticmethod
    def kill_switch(*, tenant_id: UUID, reason: str, actor_user_id: int | None) -> Tenant:
        return TenantLifecycleService.change_status(
            tenant_id=tenant_id, action="kill_switch", reason=reason, actor_user_id=actor_user_id
        )

    @staticmethod
    def enable_maintenance(
        *,
        tenant_id: UUID,
        reason: str,
        actor_user_id: int | None,
        estimated_duration: str = "",
    ) -> Tenant:
        return TenantLifecycleService.change_status(
            tenant_id=tenant_id,
            action="enable_maintenance",
            reason=reason,
            actor_user_id=actor_user_id,
            estimated_duration=estimated_duration,
        )

    @staticmethod
    def disable_maintenance(*, tenant_id: UUID, actor_user_id: int | None, reason: str = "") -> Tenant:
        return TenantLifecycleService.change_status(
            tenant_id=tenant_id, action="disable_maintenance", reason=reason, actor_user_id=actor_user_id
        )

    @staticmethod
    def freeze(*, tenant_id: UUID, reason: str, actor_user_id: int | None) -> Tenant:
        return TenantLifecycleService.change_status(
            tenant_id=tenant_id, action="freeze", reason=reason, actor_user_id=actor_user_id
        )

    @staticmethod
    def reactivate(*, tenant_id: UUID, reason: str, actor_user_id: int | None) -> Tenant:
        return TenantLifecycleService.change_status(
            tenant_id=tenant_id, action="reactivate", reason=reason, actor_user_id=actor_user_id
        )

    @staticmethod
    @transaction.atomic
    def change_status(
        *,
        tenant_id: UUID,
        action: str,
        reason: str = "",
        actor_user_id: int | None = None,
        estimated_duration: str = "",
    ) -> Tenant:
        if action not in LIFECYCLE_ACTIONS:
            raise ValidationError({"action": f"Invalid action. Allowed: {sorted(LIFECYCLE_ACTIONS)}"})

        reason = (reason or "").strip()
        if action in REASON_REQUIRED and not reason:
            raise ValidationError({"reason": "This field is required."})

        t = Tenant.objects.select_for_update().filter(id=tenant_id).first()
        if t is None:
            raise NotFound("Tenant")

        from_status = t.status
        tenant_settings = dict(t.settings or {})

        if action == "disable_maintenance":
            if from_status != TenantStatus.MAINTENANCE:
                raise InvalidState(f"Tenant is not in maintenance (status {from_status}).")
            maintenance = tenant_settings.pop("maintenance", None) or {}
            to_status = maintenance.get("previous_status") or TenantStatus.ACTIVE
        else:
            to_status = LIFECYCLE_ACTIONS[action]
            if from_status == to_status:
                raise InvalidState(f"Tenant is already {from_status}.")
            tenant_settings.pop("maintenance", None)

        if action == "enable_maintenance":
            tenant_settings["maintenance"] = {
                "reason": reason,
                "estimated_duration": (estimated_duration or "").strip(),
                "previous_status": from_status,
                "enabled_at": timezone.now().isoformat(),
                "enabled_by": actor_user_id,
            }

        t.status = to_status
        t.settings = normalize_settings(tenant_settings)
        t.save(update_fields=["status", "settings", "updated_at"])

        AuditService.log(
            action=f"tenant.{action}",
            subject_type="tenant",
            subject_id=t.id,
            tenant_id=t.id,
            actor_user_id=actor_user_id,
            from_state=from_status,
            to_state=to_status,
            reason=reason,
            metadata={"estimated_duration": estimated_duration} if estimated_duration else {},
        )

        logger.info("tenant %s %s: %s -> %s", t.id, action, from_status, to_status)
        publish_on_commit(
            "tenant.status_changed",
            {"tenant_id": str(t.id), "from": from_status, "to": to_status, "action": action},
        )
        return t
