# dental_core/iam/capabilities.py
"""
Role -> capability catalogue and the single resolver that merges a principal's roles.

Both the authorization check (CapabilityPermission) and the UI gating payload (/me/)
call merge_capabilities(); nothing else decides what a principal can do.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


# -----------------------------
# Role codes
# -----------------------------
ROLE_SYSTEM_OWNER = "SYSTEM_OWNER"
ROLE_CLINIC_OWNER = "CLINIC_OWNER"
ROLE_ADMIN = "ADMIN"
ROLE_DOCTOR = "DOCTOR"
ROLE_NURSE = "NURSE"
ROLE_RECEPTIONIST = "RECEPTIONIST"
ROLE_INVENTORY_MANAGER = "INVENTORY_MANAGER"
ROLE_BILLING_STAFF = "BILLING_STAFF"
ROLE_PATIENT = "PATIENT"


# -----------------------------
# Action keys
# -----------------------------
DASHBOARD_VIEW = "dashboard:view"
CLINICAL_VIEW = "clinical:view"

APPOINTMENTS_VIEW = "appointments:view"
APPOINTMENTS_CREATE = "appointments:create"

PATIENTS_VIEW = "patients:view"
PATIENTS_CREATE = "patients:create"
PATIENTS_UPDATE = "patients:update"

INVENTORY_VIEW = "inventory:view"
INVENTORY_CREATE = "inventory:create"
INVENTORY_ADJUST = "inventory:adjust"

PRESCRIPTIONS_VIEW = "prescriptions:view"
PRESCRIPTIONS_CREATE = "prescriptions:create"
PRESCRIPTIONS_DISPENSE = "prescriptions:dispense"
PRESCRIPTIONS_CANCEL = "prescriptions:cancel"

BILLING_VIEW = "billing:view"
REPORTS_VIEW = "reports:view"
STAFF_VIEW = "staff:view"
SETTINGS_VIEW = "settings:view"
SUPPORT_VIEW = "support:view"
AUDIT_VIEW = "audit:view"

PORTAL_HOME = "portal:home"
PORTAL_BOOKINGS = "portal:bookings"
PORTAL_TIMELINE = "portal:timeline"

SYSTEM_DASHBOARD = "system:dashboard"
SYSTEM_TENANTS_VIEW = "system:tenants:view"
SYSTEM_TENANTS_MANAGE = "system:tenants:manage"
SYSTEM_KILL_SWITCH = "system:kill_switch"
SYSTEM_AUDIT = "system:audit"


@dataclass(frozen=True)
class Capability:
    """
    One permitted action. label/href/section are display metadata for navigation
    surfaces; pure API actions leave them empty.
    """
    action: str
    label: Optional[str] = None
    href: Optional[str] = None
    section: Optional[str] = None

    @property
    def is_navigable(self) -> bool:
        return bool(self.label and self.href)

    def as_dict(self) -> dict:
        return asdict(self)


def _c(action: str, label: str | None = None, href: str | None = None, section: str | None = None) -> Capability:
    return Capability(action=action, label=label, href=href, section=section)


_CLINIC_MANAGEMENT = (
    _c(DASHBOARD_VIEW, "Dashboard", "/dashboard", "clinic"),
    _c(STAFF_VIEW, "Employees", "/dashboard/staff", "clinic"),
    _c(APPOINTMENTS_VIEW, "Appointments", "/appointments", "clinic"),
    _c(PATIENTS_VIEW, "Patients", "/patients", "clinic"),
    _c(INVENTORY_VIEW, "Inventory", "/inventory", "clinic"),
    _c(SETTINGS_VIEW, "Settings", "/dashboard/settings", "clinic"),
    _c(APPOINTMENTS_CREATE),
    _c(PATIENTS_CREATE),
    _c(PATIENTS_UPDATE),
    _c(INVENTORY_CREATE),
    _c(INVENTORY_ADJUST),
    _c(PRESCRIPTIONS_VIEW),
    _c(PRESCRIPTIONS_CREATE),
    _c(PRESCRIPTIONS_DISPENSE),
    _c(PRESCRIPTIONS_CANCEL),
    _c(BILLING_VIEW),
    _c(REPORTS_VIEW),
    _c(SUPPORT_VIEW),
    _c(AUDIT_VIEW),
)

ROLE_CAPABILITIES: dict[str, tuple[Capability, ...]] = {
    ROLE_SYSTEM_OWNER: (
        _c(SYSTEM_DASHBOARD, "Overview", "/system/dashboard", "system"),
        _c(SYSTEM_TENANTS_VIEW, "Tenants", "/system/dashboard/tenants", "system"),
        _c(SYSTEM_AUDIT, "Audit Logs", "/system/dashboard/audit", "system"),
        _c(SYSTEM_TENANTS_MANAGE),
        _c(SYSTEM_KILL_SWITCH),
    ),
    ROLE_CLINIC_OWNER: _CLINIC_MANAGEMENT,
    ROLE_ADMIN: _CLINIC_MANAGEMENT,
    ROLE_DOCTOR: (
        _c(CLINICAL_VIEW, "Clinical", "/clinical", "clinical"),
        _c(APPOINTMENTS_VIEW, "My Appointments", "/appointments/mine", "clinical"),
        _c(PATIENTS_VIEW, "Patients", "/patients", "clinical"),
        _c(PATIENTS_UPDATE),
        _c(PRESCRIPTIONS_VIEW),
        _c(PRESCRIPTIONS_CREATE),
        _c(PRESCRIPTIONS_CANCEL),
        _c(INVENTORY_VIEW),
        _c(REPORTS_VIEW),
    ),
    ROLE_NURSE: (
        _c(CLINICAL_VIEW, "Clinical", "/clinical", "clinical"),
        _c(APPOINTMENTS_VIEW, "Appointments", "/appointments", "clinical"),
        _c(PATIENTS_VIEW, "Patients", "/patients", "clinical"),
        _c(PATIENTS_UPDATE),
        _c(PRESCRIPTIONS_VIEW),
        _c(INVENTORY_VIEW),
    ),
    ROLE_RECEPTIONIST: (
        _c(DASHBOARD_VIEW, "Dashboard", "/dashboard", "front-desk"),
        _c(APPOINTMENTS_VIEW, "Appointments", "/appointments", "front-desk"),
        _c(PATIENTS_VIEW, "Patients", "/patients", "front-desk"),
        _c(SUPPORT_VIEW, "Support", "/support", "front-desk"),
        _c(APPOINTMENTS_CREATE),
        _c(PATIENTS_CREATE),
        _c(PATIENTS_UPDATE),
        _c(BILLING_VIEW),
        _c(PRESCRIPTIONS_DISPENSE),
    ),
    ROLE_INVENTORY_MANAGER: (
        _c(INVENTORY_VIEW, "Inventory", "/inventory", "pharmacy"),
        _c(PRESCRIPTIONS_VIEW, "Pharmacy", "/dashboard/pharmacy", "pharmacy"),
        _c(INVENTORY_CREATE),
        _c(INVENTORY_ADJUST),
        _c(PRESCRIPTIONS_DISPENSE),
        _c(REPORTS_VIEW),
    ),
    ROLE_BILLING_STAFF: (
        _c(BILLING_VIEW, "Dashboard", "/finance", "finance"),
        _c(REPORTS_VIEW, "Reports", "/finance/reports", "finance"),
        _c(PATIENTS_VIEW),
        _c(APPOINTMENTS_VIEW),
        _c(PRESCRIPTIONS_DISPENSE),
    ),
    ROLE_PATIENT: (
        _c(PORTAL_HOME, "Home", "/portal", "portal"),
        _c(PORTAL_BOOKINGS, "My Bookings", "/portal/bookings", "portal"),
        _c(PORTAL_TIMELINE, "My History", "/portal/history", "portal"),
    ),
}

KNOWN_ROLES = frozenset(ROLE_CAPABILITIES)


class CapabilitySet:
    """
    Deduplicated, insertion-ordered set of capabilities keyed by action.
    """

    __slots__ = ("_by_action",)

    def __init__(self, capabilities: Iterable[Capability] = ()):
        by_action: dict[str, Capability] = {}
        for cap in capabilities:
            kept = by_action.get(cap.action)
            if kept is None or (cap.is_navigable and not kept.is_navigable):
                by_action[cap.action] = cap
        self._by_action = by_action

    def has(self, action: str) -> bool:
        return action in self._by_action

    def __contains__(self, action: object) -> bool:
        return action in self._by_action

    def __len__(self) -> int:
        return len(self._by_action)

    def __iter__(self):
        return iter(self._by_action.values())

    def get(self, action: str) -> Capability | None:
        return self._by_action.get(action)

    @property
    def actions(self) -> frozenset[str]:
        return frozenset(self._by_action)

    def navigation(self) -> list[Capability]:
        return [c for c in self._by_action.values() if c.is_navigable]

    def as_list(self) -> list[dict]:
        return [c.as_dict() for c in self._by_action.values()]


@lru_cache(maxsize=256)
def _merge(roles: tuple[str, ...]) -> CapabilitySet:
    merged: list[Capability] = []
    for role in roles:
        caps = ROLE_CAPABILITIES.get(role)
        if caps is None:
            logger.warning("ignoring unknown role %r", role)
            continue
        merged.extend(caps)
    # First role wins for display metadata; a bare grant never hides a later nav entry.
    return CapabilitySet(merged)


def merge_capabilities(roles: Iterable[str]) -> CapabilitySet:
    """
    Union the fixed capability sets of `roles`, in order.
    When two roles carry different display metadata for the same action, the role
    listed first wins. A role that grants an action without a nav entry leaves room
    for a later role that does show it.
    """
    return _merge(tuple(str(r) for r in roles or ()))
