# dental_core/iam/permissions.py

from __future__ import annotations

from rest_framework.permissions import SAFE_METHODS, BasePermission

from dental_core.common.api.exceptions import Forbidden
from dental_core.iam import capabilities as caps
from dental_core.iam.capabilities import merge_capabilities
from dental_core.iam.principal import get_principal
from dental_core.tenants.gate import enforce_tenant_gate


class CapabilityPermission(BasePermission):
    """
    Capability-based access control. The single authorization check of the API.

    Key behavior:
    - Resolves the request Principal (401 if none).
    - Runs the tenant gate before anything tenant-scoped (SUSPENDED / FROZEN / MAINTENANCE).
    - Looks up the capability required for the view action and checks it against
      merge_capabilities(principal.roles).
    - If the action is unknown and the request is SAFE, falls back to list/retrieve.
    - Unknown action on an unsafe method => deny.
    """

    # Override in subclasses: dict of action -> required capability (None = authenticated only)
    required_capability_per_action: dict[str, str | None] = {}

    # tenant-scoped endpoints refuse principals without a tenant (system owner)
    requires_tenant = True

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in SAFE_METHODS:
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        principal = get_principal(request)

        if self.requires_tenant and principal.tenant_id is None:
            raise Forbidden("This operation requires a clinic-bound account.")

        enforce_tenant_gate(principal, request.method)

        action = self._infer_action(request, view)
        mapping = self.required_capability_per_action

        if action in mapping:
            required = mapping[action]
        elif request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            read_action = "retrieve" if ("pk" in kwargs or "id" in kwargs) else "list"
            if read_action not in mapping:
                raise Forbidden()
            required = mapping[read_action]
        else:
            raise Forbidden()

        if required is None:
            return True

        if not merge_capabilities(principal.roles).has(required):
            raise Forbidden(f"Missing capability '{required}'.")
        return True

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


# Specific permission classes for each module

class AuthenticatedPrincipalPermission(CapabilityPermission):
    """Any resolved principal (used by /me/)."""
    requires_tenant = False

    def has_permission(self, request, view) -> bool:
        principal = get_principal(request)
        enforce_tenant_gate(principal, request.method)
        return True


class PatientPermission(CapabilityPermission):
    """Permissions for patient records. The timeline does its own requester check."""
    required_capability_per_action = {
        "list": caps.PATIENTS_VIEW,
        "retrieve": caps.PATIENTS_VIEW,
        "create": caps.PATIENTS_CREATE,
        "update": caps.PATIENTS_UPDATE,
        "partial_update": caps.PATIENTS_UPDATE,
        "timeline": None,
    }


class InventoryPermission(CapabilityPermission):
    """Permissions for the inventory ledger"""
    required_capability_per_action = {
        "list": caps.INVENTORY_VIEW,
        "retrieve": caps.INVENTORY_VIEW,
        "low_stock": caps.INVENTORY_VIEW,
        "transactions": caps.INVENTORY_VIEW,
        "create": caps.INVENTORY_CREATE,
        "adjust": caps.INVENTORY_ADJUST,
    }


class PrescriptionPermission(CapabilityPermission):
    """Permissions for prescriptions"""
    required_capability_per_action = {
        "list": caps.PRESCRIPTIONS_VIEW,
        "retrieve": caps.PRESCRIPTIONS_VIEW,
        "create": caps.PRESCRIPTIONS_CREATE,
        "fulfill": caps.PRESCRIPTIONS_DISPENSE,
        "cancel": caps.PRESCRIPTIONS_CANCEL,
    }


class TenantManagementPermission(CapabilityPermission):
    """Platform-level tenant management (system owner)"""
    requires_tenant = False
    required_capability_per_action = {
        "list": caps.SYSTEM_TENANTS_VIEW,
        "retrieve": caps.SYSTEM_TENANTS_VIEW,
        "create": caps.SYSTEM_TENANTS_MANAGE,
        "change_status": caps.SYSTEM_TENANTS_MANAGE,
    }


class AuditPermission(CapabilityPermission):
    """
    Audit log access: system owners platform-wide, clinic staff with audit:view
    for their own tenant. The view narrows the tenant filter.
    """
    requires_tenant = False

    def has_permission(self, request, view) -> bool:
        principal = get_principal(request)

        if request.method not in SAFE_METHODS:
            raise Forbidden()

        if principal.is_system_owner:
            if not principal.can(caps.SYSTEM_AUDIT):
                raise Forbidden(f"Missing capability '{caps.SYSTEM_AUDIT}'.")
            return True

        enforce_tenant_gate(principal, request.method)
        if not principal.can(caps.AUDIT_VIEW):
            raise Forbidden(f"Missing capability '{caps.AUDIT_VIEW}'.")
        return True
