# dental_core/inventory/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from dental_core.common.api.exceptions import NotFound
from dental_core.common.api.pagination import MovementLogPagination, paginate
from dental_core.iam.permissions import InventoryPermission
from dental_core.inventory.api.serializers import (
    InventoryAdjustSerializer,
    InventoryItemCreateSerializer,
    InventoryItemSerializer,
    InventoryTransactionSerializer,
)
from dental_core.inventory.models import InventoryItem
from dental_core.inventory.selectors import (
    get_item_or_none,
    low_stock_items,
    search_items,
    transactions_for_item,
)
from dental_core.inventory.services import InventoryLedger


def _truthy(value) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "yes")


@extend_schema_view(
    list=extend_schema(
        tags=["Inventory"],
        operation_id="v1_inventory_items_list",
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("low_stock", OpenApiTypes.BOOL, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: InventoryItemSerializer(many=True)},
    ),
    retrieve=extend_schema(tags=["Inventory"], operation_id="v1_inventory_items_retrieve", responses={200: InventoryItemSerializer}),
    create=extend_schema(
        tags=["Inventory"],
        operation_id="v1_inventory_items_create",
        request=InventoryItemCreateSerializer,
        responses={201: InventoryItemSerializer},
    ),
    adjust=extend_schema(
        tags=["Inventory"],
        operation_id="v1_inventory_items_adjust",
        request=InventoryAdjustSerializer,
        responses={200: InventoryItemSerializer},
    ),
    low_stock=extend_schema(tags=["Inventory"], operation_id="v1_inventory_items_low_stock", responses={200: InventoryItemSerializer(many=True)}),
    transactions=extend_schema(
        tags=["Inventory"],
        operation_id="v1_inventory_items_transactions",
        responses={200: InventoryTransactionSerializer(many=True)},
    ),
)
class InventoryItemViewSet(viewsets.ViewSet):
    permission_classes = [InventoryPermission]

    serializer_class = InventoryItemSerializer
    queryset = InventoryItem.objects.none()

    def _get(self, request, pk) -> InventoryItem:
        try:
            item_id = UUID(str(pk))
        except ValueError:
            raise NotFound("Inventory item")
        item = get_item_or_none(tenant_id=request.principal.tenant_id, item_id=item_id)
        if item is None:
            raise NotFound("Inventory item")
        return item

    def list(self, request):
        qs = search_items(
            tenant_id=request.principal.tenant_id,
            q=request.query_params.get("q"),
            low_stock=_truthy(request.query_params.get("low_stock")),
        )
        return paginate(request, qs, InventoryItemSerializer)

    def retrieve(self, request, pk=None):
        return Response(InventoryItemSerializer(self._get(request, pk)).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = InventoryItemCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        item = InventoryLedger.create_item(
            tenant_id=request.principal.tenant_id,
            actor_user_id=request.principal.user_id,
            **ser.validated_data,
        )
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="adjust")
    def adjust(self, request, pk=None):
        ser = InventoryAdjustSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        item = self._get(request, pk)
        item = InventoryLedger.adjust(
            tenant_id=request.principal.tenant_id,
            item_id=item.id,
            delta=ser.validated_data["delta"],
            reason=ser.validated_data["reason"],
            actor_user_id=request.principal.user_id,
        )
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):
        qs = low_stock_items(tenant_id=request.principal.tenant_id)
        return Response(InventoryItemSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], url_path="transactions")
    def transactions(self, request, pk=None):
        item = self._get(request, pk)
        qs = transactions_for_item(tenant_id=item.tenant_id, item_id=item.id)
        return paginate(request, qs, InventoryTransactionSerializer, paginator=MovementLogPagination())
