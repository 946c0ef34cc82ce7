# dental_core/tenants/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from dental_core.tenants.models import Tenant, TenantStatus


def tenant_qs() -> QuerySet[Tenant]:
    return Tenant.objects.all()


def active_tenants_qs() -> QuerySet[Tenant]:
    return Tenant.objects.filter(status=TenantStatus.ACTIVE)


def get_tenant_or_none(*, tenant_id: UUID) -> Optional[Tenant]:
    return Tenant.objects.filter(id=tenant_id).first()


def get_tenant_status(*, tenant_id: UUID) -> Optional[str]:
    return Tenant.objects.filter(id=tenant_id).values_list("status", flat=True).first()


def maintenance_info(tenant: Tenant) -> dict | None:
    if tenant.status != TenantStatus.MAINTENANCE:
        return None
    return (tenant.settings or {}).get("maintenance")


def tenant_stats(*, tenant_id: UUID) -> dict:
    """
    Operational counters shown on the system-owner tenant detail page.
    Revenue is intentionally absent: billing math lives outside this service.
    """
    from django.db.models import F

    from dental_core.appointments.models import ACTIVE_APPOINTMENT_STATES, Appointment
    from dental_core.iam.models import UserProfile
    from dental_core.inventory.models import InventoryItem
    from dental_core.patients.models import Patient
    from dental_core.prescriptions.models import Prescription, PrescriptionStatus

    appointments = Appointment.objects.for_tenant(tenant_id)
    items = InventoryItem.objects.for_tenant(tenant_id)
    prescriptions = Prescription.objects.for_tenant(tenant_id)

    return {
        "users": UserProfile.objects.filter(tenant_id=tenant_id, is_active=True).count(),
        "patients": Patient.objects.for_tenant(tenant_id).count(),
        "appointments": {
            "total": appointments.count(),
            "active": appointments.filter(status__in=ACTIVE_APPOINTMENT_STATES).count(),
        },
        "inventory": {
            "total": items.count(),
            "low_stock": items.filter(quantity__lte=F("reorder_threshold")).count(),
        },
        "prescriptions": {
            "total": prescriptions.count(),
            "pending": prescriptions.filter(status=PrescriptionStatus.PENDING).count(),
        },
    }
