# dental_core/iam/principal.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated

from dental_core.common.api.exceptions import Forbidden
from dental_core.iam.capabilities import CapabilitySet, merge_capabilities
from dental_core.iam.models import PrincipalKind, UserProfile


@dataclass(frozen=True)
class Principal:
    """
    Request actor: verified identity, optional tenant binding, ordered roles.
    """
    user_id: int
    tenant_id: Optional[UUID]
    roles: tuple[str, ...]
    kind: str
    patient_id: Optional[UUID] = None

    @property
    def is_system_owner(self) -> bool:
        return self.kind == PrincipalKind.SYSTEM_OWNER

    @property
    def is_patient(self) -> bool:
        return self.kind == PrincipalKind.PATIENT

    @property
    def is_staff(self) -> bool:
        return self.kind == PrincipalKind.STAFF

    @property
    def capabilities(self) -> CapabilitySet:
        return merge_capabilities(self.roles)

    def can(self, action: str) -> bool:
        return self.capabilities.has(action)


def resolve_principal(user) -> Principal:
    """
    Turn an authenticated Django user into a Principal. Read-only.
    Raises NotAuthenticated / AuthenticationFailed (401) when no usable identity exists.
    """
    if not user or not getattr(user, "is_authenticated", False):
        raise NotAuthenticated()

    if not getattr(user, "is_active", False):
        raise AuthenticationFailed("User is inactive.")

    profile = (
        UserProfile.objects.filter(user_id=user.id, is_active=True)
        .only("tenant_id", "kind", "roles", "patient_id")
        .first()
    )
    if profile is None:
        raise AuthenticationFailed("No active profile for this identity.")

    tenant_id = profile.tenant_id
    if profile.kind == PrincipalKind.SYSTEM_OWNER:
        tenant_id = None
    elif tenant_id is None:
        raise AuthenticationFailed("Profile is not bound to a tenant.")

    roles = tuple(str(r) for r in (profile.roles or []))
    if profile.kind == PrincipalKind.PATIENT:
        roles = roles or ("PATIENT",)

    return Principal(
        user_id=user.id,
        tenant_id=tenant_id,
        roles=roles,
        kind=profile.kind,
        patient_id=profile.patient_id if profile.kind == PrincipalKind.PATIENT else None,
    )


def get_principal(request) -> Principal:
    """
    Principal for this request, resolved once and cached on the request.
    Works for both the JWT authentication path and DRF force_authenticate.
    """
    cached = getattr(request, "principal", None)
    if isinstance(cached, Principal):
        return cached

    principal = resolve_principal(getattr(request, "user", None))
    request.principal = principal
    return principal


def require_tenant(principal: Principal) -> UUID:
    """
    Tenant-scoped operations need a tenant-bound principal.
    """
    if principal.tenant_id is None:
        raise Forbidden("This operation requires a clinic-bound account.")
    return principal.tenant_id
