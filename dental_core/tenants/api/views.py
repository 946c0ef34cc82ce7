# dental_core/tenants/api/views.py
from __future__ import annotations

from uuid import UUID

from django.db.models import Q

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from dental_core.common.api.exceptions import NotFound
from dental_core.common.api.pagination import paginate
from dental_core.iam.permissions import TenantManagementPermission
from dental_core.tenants.api.serializers import (
    TenantChangeStatusSerializer,
    TenantCreateSerializer,
    TenantDetailSerializer,
    TenantSerializer,
    TenantStatusResponseSerializer,
)
from dental_core.tenants.models import Tenant, TenantStatus
from dental_core.tenants.selectors import get_tenant_or_none, tenant_qs, tenant_stats
from dental_core.tenants.services import TenantLifecycleService, TenantService


@extend_schema_view(
    list=extend_schema(tags=["Tenants"], operation_id="v1_tenants_list", responses={200: TenantSerializer(many=True)}),
    retrieve=extend_schema(tags=["Tenants"], operation_id="v1_tenants_retrieve", responses={200: TenantDetailSerializer}),
    create=extend_schema(tags=["Tenants"], operation_id="v1_tenants_create", request=TenantCreateSerializer, responses={201: TenantSerializer}),
    change_status=extend_schema(
        tags=["Tenants"],
        operation_id="v1_tenants_change_status",
        request=TenantChangeStatusSerializer,
        responses={200: TenantStatusResponseSerializer},
    ),
)
class TenantViewSet(viewsets.ViewSet):
    """
    System-owner tenant management.
    Routing is centralized in dental_core/api/urls.py.
    """

    permission_classes = [TenantManagementPermission]

    serializer_class = TenantSerializer
    queryset = Tenant.objects.none()

    def _get(self, pk) -> Tenant:
        try:
            obj = get_tenant_or_none(tenant_id=UUID(str(pk)))
        except ValueError:
            obj = None
        if obj is None:
            raise NotFound("Tenant")
        return obj

    def list(self, request):
        qs = tenant_qs().order_by("-created_at")

        status_filter = request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter) if status_filter in TenantStatus.values else qs.none()

        search = (request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(code__icontains=search))

        return paginate(request, qs, TenantSerializer)

    def retrieve(self, request, pk=None):
        obj = self._get(pk)
        return Response(
            {"tenant": TenantSerializer(obj).data, "stats": tenant_stats(tenant_id=obj.id)},
            status=status.HTTP_200_OK,
        )

    def create(self, request):
        ser = TenantCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        t = TenantService.create(
            name=ser.validated_data["name"],
            code=ser.validated_data["code"],
            settings=ser.validated_data.get("settings") or {},
            actor_user_id=request.principal.user_id,
        )
        return Response(TenantSerializer(t).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="change-status")
    def change_status(self, request, pk=None):
        ser = TenantChangeStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        tenant = self._get(pk)
        t = TenantLifecycleService.change_status(
            tenant_id=tenant.id,
            action=ser.validated_data["action"],
            reason=ser.validated_data.get("reason", ""),
            estimated_duration=ser.validated_data.get("estimated_duration", ""),
            actor_user_id=request.principal.user_id,
        )
        return Response(
            {"tenant_id": str(t.id), "status": t.status, "action": ser.validated_data["action"]},
            status=status.HTTP_200_OK,
        )
