# dental_core/inventory/services.py
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from dental_core.audit.services import AuditService
from dental_core.common.api.exceptions import InvalidQuantity, NotFound, StockInsufficient
from dental_core.common.events import publish_on_commit
from dental_core.inventory.models import InventoryItem, InventoryTransaction, InventoryTransactionKind

logger = logging.getLogger(__name__)


def _publish_low_stock(item: InventoryItem) -> None:
    publish_on_commit(
        "inventory.low_stock",
        {
            "tenant_id": str(item.tenant_id),
            "inventory_item_id": str(item.id),
            "quantity": item.quantity,
            "reorder_threshold": item.reorder_threshold,
        },
    )


class InventoryLedger:
    """
    The only writer of InventoryItem.quantity.

    decrement_if_sufficient is a single conditional UPDATE, so the check and the
    write are one statement and two concurrent callers can never oversell a row.
    """

    @staticmethod
    def decrement_if_sufficient(*, tenant_id: UUID, item_id: UUID, amount: int) -> int:
        """
        Decrement (tenant_id, item_id) by `amount` if enough stock exists.
        Returns the new quantity. No mutation on failure.
        """
        amount = int(amount)
        if amount < 1:
            raise InvalidQuantity("Amount must be a positive integer.")

        with transaction.atomic():
            updated = InventoryItem.objects.filter(
                id=item_id,
                tenant_id=tenant_id,
                quantity__gte=amount,
            ).update(quantity=F("quantity") - amount, updated_at=timezone.now())

            if updated == 0:
                available = (
                    InventoryItem.objects.filter(id=item_id, tenant_id=tenant_id)
                    .values_list("quantity", flat=True)
                    .first()
                )
                if available is None:
                    raise NotFound("Inventory item")
                logger.warning(
                    "stock insufficient for item %s: available=%s requested=%s", item_id, available, amount
                )
                raise StockInsufficient(available=available, requested=amount, item_id=item_id)

            return InventoryItem.objects.filter(id=item_id).values_list("quantity", flat=True).get()

    @staticmethod
    def record_movement(
        *,
        item: InventoryItem,
        kind: str,
        quantity_delta: int,
        quantity_after: int,
        actor_user_id: int | None,
        reference: str = "",
        reason: str = "",
    ) -> InventoryTransaction:
        txn = InventoryTransaction.objects.create(
            tenant_id=item.tenant_id,
            item=item,
            kind=kind,
            quantity_delta=quantity_delta,
            quantity_after=quantity_after,
            reference=reference[:128],
            reason=(reason or "")[:500],
            actor_user_id=actor_user_id,
        )

        # publish only when this movement crossed the threshold downwards
        before = quantity_after - quantity_delta
        if quantity_delta < 0 and quantity_after <= item.reorder_threshold < before:
            item.quantity = quantity_after
            _publish_low_stock(item)
        return txn

    @staticmethod
    @transaction.atomic
    def adjust(
        *,
        tenant_id: UUID,
        item_id: UUID,
        delta: int,
        reason: str,
        actor_user_id: int | None,
    ) -> InventoryItem:
        """
        Signed manual correction. Row-locked; always audited.
        """
        delta = int(delta)
        reason = (reason or "").strip()
        if delta == 0:
            raise InvalidQuantity("Adjustment must be non-zero.")
        if not reason:
            raise InvalidQuantity("A reason is required for stock adjustments.")

        item = InventoryItem.objects.select_for_update().filter(id=item_id, tenant_id=tenant_id).first()
        if item is None:
            raise NotFound("Inventory item")

        before = item.quantity
        after = before + delta
        if after < 0:
            raise InvalidQuantity(
                f"Adjustment would make quantity negative (current {before}, delta {delta})."
            )

        item.quantity = after
        item.save(update_fields=["quantity", "updated_at"])

        InventoryLedger.record_movement(
            item=item,
            kind=InventoryTransactionKind.ADJUSTED,
            quantity_delta=delta,
            quantity_after=after,
            actor_user_id=actor_user_id,
            reason=reason,
        )
        AuditService.log(
            action="inventory.adjusted",
            subject_type="inventory_item",
            subject_id=item.id,
            tenant_id=tenant_id,
            actor_user_id=actor_user_id,
            reason=reason,
            metadata={"quantity_before": before, "quantity_after": after, "delta": delta},
        )

        logger.info("inventory item %s adjusted %+d -> %s", item.id, delta, after)
        return item

    @staticmethod
    @transaction.atomic
    def create_item(
        *,
        tenant_id: UUID,
        actor_user_id: int | None,
        name: str,
        quantity: int = 0,
        reorder_threshold: int = 0,
        sku: str = "",
        category: str = "",
        unit: str = "unit",
    ) -> InventoryItem:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": "This field is required."})
        if int(quantity) < 0:
            raise InvalidQuantity("Initial quantity cannot be negative.")

        item = InventoryItem.objects.create(
            tenant_id=tenant_id,
            name=name,
            sku=sku or "",
            category=category or "",
            unit=unit or "unit",
            quantity=int(quantity),
            reorder_threshold=int(reorder_threshold),
        )

        if item.quantity > 0:
            InventoryLedger.record_movement(
                item=item,
                kind=InventoryTransactionKind.RECEIVED,
                quantity_delta=item.quantity,
                quantity_after=item.quantity,
                actor_user_id=actor_user_id,
                reason="Initial stock",
            )

        AuditService.log(
            action="inventory.item_created",
            subject_type="inventory_item",
            subject_id=item.id,
            tenant_id=tenant_id,
            actor_user_id=actor_user_id,
            metadata={"quantity": item.quantity, "reorder_threshold": item.reorder_threshold},
        )
        return item
