# dental_core/tenants/gate.py
from __future__ import annotations

import logging

from dental_core.common.api.exceptions import ServiceUnavailable, TenantSuspended
from dental_core.tenants.models import Tenant, TenantStatus

logger = logging.getLogger(__name__)

SAFE_METHODS = ("GET", "HEAD", "OPTIONS")


def enforce_tenant_gate(principal, method: str = "GET") -> None:
    """
    Tenant-wide availability check, run before any tenant-scoped work.

    Reads the status from the store on every call (no cache), so a lifecycle
    transition is visible to the very next request.

      SUSPENDED   -> every non-system-owner request fails TenantSuspended
      FROZEN      -> reads pass, writes fail TenantSuspended
      MAINTENANCE -> patient requests fail ServiceUnavailable, staff pass
    """
    if principal.is_system_owner or principal.tenant_id is None:
        return

    status = (
        Tenant.objects.filter(id=principal.tenant_id)
        .values_list("status", flat=True)
        .first()
    )
    if status is None:
        # profile points at a tenant that no longer exists
        raise TenantSuspended()

    if status == TenantStatus.ACTIVE:
        return

    if status == TenantStatus.SUSPENDED:
        logger.info("blocked request for suspended tenant %s (user %s)", principal.tenant_id, principal.user_id)
        raise TenantSuspended()

    if status == TenantStatus.FROZEN:
        if (method or "GET").upper() in SAFE_METHODS:
            return
        raise TenantSuspended("This clinic account is frozen; changes are disabled.")

    if status == TenantStatus.MAINTENANCE:
        if principal.is_patient:
            raise ServiceUnavailable()
        return
