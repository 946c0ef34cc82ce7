# dental_core/inventory/admin.py
from django.contrib import admin

from dental_core.inventory.models import InventoryItem, InventoryTransaction


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "quantity", "reorder_threshold", "unit", "tenant_id", "updated_at")
    search_fields = ("name", "sku")
    # quantity changes go through the ledger so they are audited
    readonly_fields = ("id", "quantity", "created_at", "updated_at")
    ordering = ("name",)


@admin.register(InventoryTransaction)
class InventoryTransactionAdmin(admin.ModelAdmin):
    list_display = ("item", "kind", "quantity_delta", "quantity_after", "reference", "actor_user_id", "created_at")
    list_filter = ("kind",)
    ordering = ("-created_at",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
