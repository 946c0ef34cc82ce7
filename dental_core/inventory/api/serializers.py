# dental_core/inventory/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from dental_core.inventory.models import InventoryItem, InventoryTransaction


class InventoryItemSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            "id",
            "tenant_id",
            "name",
            "sku",
            "category",
            "unit",
            "quantity",
            "reorder_threshold",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class InventoryItemCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    sku = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    category = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    unit = serializers.CharField(max_length=32, required=False, default="unit")
    quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    reorder_threshold = serializers.IntegerField(min_value=0, required=False, default=0)


class InventoryAdjustSerializer(serializers.Serializer):
    # signed; zero and negative results are rejected by the ledger
    delta = serializers.IntegerField()
    reason = serializers.CharField(max_length=500)


class InventoryTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryTransaction
        fields = [
            "id",
            "item_id",
            "kind",
            "quantity_delta",
            "quantity_after",
            "reference",
            "reason",
            "actor_user_id",
            "created_at",
        ]
        read_only_fields = fields
