# dental_core/patients/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import Q, QuerySet

from dental_core.patients.models import Patient


def get_patient_or_none(*, tenant_id: UUID, patient_id: UUID) -> Optional[Patient]:
    """
    Tenant-scoped lookup. A patient of another tenant is indistinguishable from a missing one.
    """
    return Patient.objects.for_tenant(tenant_id).filter(id=patient_id).first()


def patient_exists(*, tenant_id: UUID, patient_id: UUID) -> bool:
    return Patient.objects.for_tenant(tenant_id).filter(id=patient_id).exists()


def search_patients(
    *,
    tenant_id: UUID,
    q: str | None = None,
) -> QuerySet[Patient]:
    qs = Patient.objects.for_tenant(tenant_id)

    qv = (q or "").strip()
    if qv:
        qs = qs.filter(
            Q(full_name__icontains=qv)
            | Q(phone__icontains=qv)
            | Q(email__icontains=qv)
        )

    return qs.order_by("-created_at")
