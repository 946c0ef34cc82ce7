# dental_core/audit/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError

from dental_core.audit.api.serializers import AuditEntrySerializer
from dental_core.audit.models import AuditEntry
from dental_core.audit.selectors import list_audit_entries
from dental_core.common.api.exceptions import Forbidden
from dental_core.common.api.pagination import paginate
from dental_core.iam.permissions import AuditPermission


def _uuid_param(request, name: str) -> UUID | None:
    raw = request.query_params.get(name) or None
    if raw is None:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        raise ValidationError({name: "Invalid UUID."})


class AuditEntryViewSet(viewsets.GenericViewSet):
    """
    Read-only audit trail.
    System owners may query any tenant (or all); clinic staff only see their own tenant.
    """
    permission_classes = [AuditPermission]

    serializer_class = AuditEntrySerializer
    queryset = AuditEntry.objects.none()

    @extend_schema(
        tags=["Audit"],
        operation_id="v1_audit_entries_list",
        responses={200: AuditEntrySerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="tenant_id",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by tenant. Clinic staff may only pass their own tenant.",
            ),
            OpenApiParameter(
                name="subject_type",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by subject type (e.g. tenant, prescription, inventory_item).",
            ),
            OpenApiParameter(
                name="subject_id",
                type=OpenApiTypes.UUID,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by subject UUID.",
            ),
            OpenApiParameter(
                name="action",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by action (e.g. tenant.kill_switch, prescription.filled).",
            ),
            OpenApiParameter(
                name="actor_user_id",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filter by actor user id (int).",
            ),
        ],
    )
    def list(self, request):
        principal = request.principal
        tenant_id = _uuid_param(request, "tenant_id")

        if not principal.is_system_owner:
            if tenant_id is not None and tenant_id != principal.tenant_id:
                raise Forbidden("Audit entries of another clinic are not visible.")
            tenant_id = principal.tenant_id

        actor_user_raw = request.query_params.get("actor_user_id")
        actor_user_id = None
        if actor_user_raw not in (None, ""):
            try:
                actor_user_id = int(actor_user_raw)
            except ValueError:
                raise ValidationError({"actor_user_id": "Invalid actor_user_id (int expected)."})

        qs = list_audit_entries(
            tenant_id=tenant_id,
            subject_type=request.query_params.get("subject_type") or None,
            subject_id=_uuid_param(request, "subject_id"),
            action=request.query_params.get("action") or None,
            actor_user_id=actor_user_id,
        )
        return paginate(request, qs, AuditEntrySerializer)
