# dental_core/patients/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from dental_core.common.api.exceptions import NotFound
from dental_core.common.api.pagination import paginate
from dental_core.iam.permissions import PatientPermission
from dental_core.patients.api.serializers import (
    PatientCreateSerializer,
    PatientSerializer,
    PatientTimelineSerializer,
    PatientUpdateSerializer,
    TimelineEventSerializer,
)
from dental_core.patients.models import Patient
from dental_core.patients.selectors import get_patient_or_none, search_patients
from dental_core.patients.services import PatientService
from dental_core.patients.timeline import PatientTimelineService


def _parse_id(pk) -> UUID:
    try:
        return UUID(str(pk))
    except ValueError:
        raise NotFound("Patient")


@extend_schema_view(
    list=extend_schema(tags=["Patients"], operation_id="v1_patients_list", responses={200: PatientSerializer(many=True)}),
    retrieve=extend_schema(tags=["Patients"], operation_id="v1_patients_retrieve", responses={200: PatientSerializer}),
    create=extend_schema(tags=["Patients"], operation_id="v1_patients_create", request=PatientCreateSerializer, responses={201: PatientSerializer}),
    partial_update=extend_schema(
        tags=["Patients"],
        operation_id="v1_patients_partial_update",
        request=PatientUpdateSerializer,
        responses={200: PatientSerializer},
    ),
    timeline=extend_schema(tags=["Patients"], operation_id="v1_patients_timeline", responses={200: PatientTimelineSerializer}),
)
class PatientViewSet(viewsets.ViewSet):
    permission_classes = [PatientPermission]

    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    def list(self, request):
        q = request.query_params.get("q", "")
        qs = search_patients(tenant_id=request.principal.tenant_id, q=q)
        return paginate(request, qs, PatientSerializer)

    def retrieve(self, request, pk=None):
        patient = get_patient_or_none(tenant_id=request.principal.tenant_id, patient_id=_parse_id(pk))
        if patient is None:
            raise NotFound("Patient")
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = PatientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.create_patient(
            tenant_id=request.principal.tenant_id,
            actor_user_id=request.principal.user_id,
            **ser.validated_data,
        )
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = PatientUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.update_patient(
            tenant_id=request.principal.tenant_id,
            actor_user_id=request.principal.user_id,
            patient_id=_parse_id(pk),
            data=ser.validated_data,
        )
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], url_path="timeline")
    def timeline(self, request, pk=None):
        patient_id = _parse_id(pk)
        events = PatientTimelineService.get_timeline(
            patient_id=patient_id,
            tenant_id=request.principal.tenant_id,
            requestor=request.principal,
        )
        return Response(
            {
                "patient_id": str(patient_id),
                "events": TimelineEventSerializer([e.as_dict() for e in events], many=True).data,
            },
            status=status.HTTP_200_OK,
        )
