# dental_core/inventory/models.py
from django.db import models
from django.db.models import Q

from dental_core.common.models import TenantScopedModel


class InventoryItem(TenantScopedModel):
    """
    Stock-keeping unit of a clinic.

    `quantity` is only written through InventoryLedger (conditional decrement or
    audited adjustment). Low stock is derived from quantity, never stored.
    """
    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=64, blank=True)
    category = models.CharField(max_length=64, blank=True)
    unit = models.CharField(max_length=32, default="unit")

    quantity = models.IntegerField(default=0)
    reorder_threshold = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "inventory_item"
        constraints = [
            models.CheckConstraint(condition=Q(quantity__gte=0), name="inventory_item_quantity_gte_0"),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "name"], name="inventory_tenant_name_idx"),
            models.Index(fields=["tenant_id", "sku"], name="inventory_tenant_sku_idx"),
        ]

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.reorder_threshold

    def __str__(self) -> str:
        return f"{self.name} ({self.quantity} {self.unit})"


class InventoryTransactionKind(models.TextChoices):
    RECEIVED = "RECEIVED", "Received"
    DISPENSED = "DISPENSED", "Dispensed"
    ADJUSTED = "ADJUSTED", "Adjusted"


class InventoryTransaction(TenantScopedModel):
    """
    Append-only stock movement. One row per quantity change, written in the same
    transaction as the change itself.
    """
    item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name="transactions")
    kind = models.CharField(max_length=16, choices=InventoryTransactionKind.choices)

    quantity_delta = models.IntegerField()
    quantity_after = models.IntegerField()

    # free-form pointer to the cause, e.g. "prescription:<uuid>"
    reference = models.CharField(max_length=128, blank=True)
    reason = models.CharField(max_length=500, blank=True)
    actor_user_id = models.BigIntegerField(null=True, blank=True)

    class Meta:
        db_table = "inventory_transaction"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant_id", "item", "created_at"], name="inv_txn_item_time_idx"),
        ]
