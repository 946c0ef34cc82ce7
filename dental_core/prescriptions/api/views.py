# dental_core/prescriptions/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from dental_core.common.api.exceptions import NotFound
from dental_core.common.api.pagination import paginate
from dental_core.iam.permissions import PrescriptionPermission
from dental_core.prescriptions.api.serializers import (
    PrescriptionCancelSerializer,
    PrescriptionCreateSerializer,
    PrescriptionFulfillResponseSerializer,
    PrescriptionSerializer,
)
from dental_core.prescriptions.filters import PrescriptionFilter
from dental_core.prescriptions.models import Prescription
from dental_core.prescriptions.selectors import get_prescription_or_none, prescriptions_qs
from dental_core.prescriptions.services import PrescriptionService


def _parse_id(pk) -> UUID:
    try:
        return UUID(str(pk))
    except ValueError:
        raise NotFound("Prescription")


@extend_schema_view(
    list=extend_schema(tags=["Prescriptions"], operation_id="v1_prescriptions_list", responses={200: PrescriptionSerializer(many=True)}),
    retrieve=extend_schema(tags=["Prescriptions"], operation_id="v1_prescriptions_retrieve", responses={200: PrescriptionSerializer}),
    create=extend_schema(
        tags=["Prescriptions"],
        operation_id="v1_prescriptions_create",
        request=PrescriptionCreateSerializer,
        responses={201: PrescriptionSerializer},
    ),
    fulfill=extend_schema(
        tags=["Prescriptions"],
        operation_id="v1_prescriptions_fulfill",
        request=None,
        responses={200: PrescriptionFulfillResponseSerializer},
    ),
    cancel=extend_schema(
        tags=["Prescriptions"],
        operation_id="v1_prescriptions_cancel",
        request=PrescriptionCancelSerializer,
        responses={200: PrescriptionSerializer},
    ),
)
class PrescriptionViewSet(viewsets.ViewSet):
    permission_classes = [PrescriptionPermission]

    serializer_class = PrescriptionSerializer
    queryset = Prescription.objects.none()

    def list(self, request):
        qs = prescriptions_qs(tenant_id=request.principal.tenant_id).order_by("-created_at", "id")

        f = PrescriptionFilter(request.query_params, queryset=qs)
        if not f.is_valid():
            raise ValidationError(f.errors)

        return paginate(request, f.qs, PrescriptionSerializer)

    def retrieve(self, request, pk=None):
        rx = get_prescription_or_none(tenant_id=request.principal.tenant_id, prescription_id=_parse_id(pk))
        if rx is None:
            raise NotFound("Prescription")
        return Response(PrescriptionSerializer(rx).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = PrescriptionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        rx = PrescriptionService.create(
            tenant_id=request.principal.tenant_id,
            actor_user_id=request.principal.user_id,
            patient_id=data["patient_id"],
            appointment_id=data.get("appointment_id"),
            medications=[dict(line) for line in data["medications"]],
            instructions=data.get("instructions", ""),
            valid_until=data.get("valid_until"),
        )
        return Response(PrescriptionSerializer(rx).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="fulfill")
    def fulfill(self, request, pk=None):
        result = PrescriptionService.fulfill(
            prescription_id=_parse_id(pk),
            tenant_id=request.principal.tenant_id,
            actor_user_id=request.principal.user_id,
        )
        return Response(PrescriptionFulfillResponseSerializer(result).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        ser = PrescriptionCancelSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        rx = PrescriptionService.cancel(
            prescription_id=_parse_id(pk),
            tenant_id=request.principal.tenant_id,
            reason=ser.validated_data["reason"],
            actor_user_id=request.principal.user_id,
        )
        return Response(PrescriptionSerializer(rx).data, status=status.HTTP_200_OK)
