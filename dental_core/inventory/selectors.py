# dental_core/inventory/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import F, Q, QuerySet

from dental_core.inventory.models import InventoryItem, InventoryTransaction


def items_qs(*, tenant_id: UUID) -> QuerySet[InventoryItem]:
    return InventoryItem.objects.for_tenant(tenant_id)


def get_item_or_none(*, tenant_id: UUID, item_id: UUID) -> Optional[InventoryItem]:
    return items_qs(tenant_id=tenant_id).filter(id=item_id).first()


def search_items(*, tenant_id: UUID, q: str | None = None, low_stock: bool = False) -> QuerySet[InventoryItem]:
    qs = items_qs(tenant_id=tenant_id)

    qv = (q or "").strip()
    if qv:
        qs = qs.filter(Q(name__icontains=qv) | Q(sku__icontains=qv) | Q(category__icontains=qv))

    if low_stock:
        qs = qs.filter(quantity__lte=F("reorder_threshold"))

    return qs.order_by("name", "id")


def low_stock_items(*, tenant_id: UUID) -> QuerySet[InventoryItem]:
    """
    Derived read: quantity <= reorder_threshold, evaluated in the database.
    """
    return items_qs(tenant_id=tenant_id).filter(quantity__lte=F("reorder_threshold")).order_by("quantity", "name")


def transactions_for_item(*, tenant_id: UUID, item_id: UUID) -> QuerySet[InventoryTransaction]:
    return InventoryTransaction.objects.for_tenant(tenant_id).filter(item_id=item_id).order_by("-created_at", "-id")


def existing_item_ids(*, tenant_id: UUID, item_ids) -> set:
    return set(items_qs(tenant_id=tenant_id).filter(id__in=list(item_ids)).values_list("id", flat=True))
