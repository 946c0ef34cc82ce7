# dental_core/billing/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from dental_core.billing.models import Invoice


def invoices_qs(*, tenant_id: UUID) -> QuerySet[Invoice]:
    return Invoice.objects.for_tenant(tenant_id)


def invoices_for_patient(*, tenant_id: UUID, patient_id: UUID) -> QuerySet[Invoice]:
    return invoices_qs(tenant_id=tenant_id).filter(patient_id=patient_id).order_by("-created_at", "id")
