# dental_core/iam/api/me.py

from __future__ import annotations

from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from dental_core.iam.api.schema_serializers import MeResponseSerializer
from dental_core.iam.capabilities import merge_capabilities
from dental_core.iam.permissions import AuthenticatedPrincipalPermission
from dental_core.tenants.selectors import get_tenant_or_none


class MeView(APIView):
    permission_classes = [AuthenticatedPrincipalPermission]

    @extend_schema(tags=["Auth"], operation_id="v1_me", responses={200: MeResponseSerializer})
    def get(self, request):
        """
        Returns the resolved principal and its merged capability set.
        The frontend gates menus and buttons on this payload only.
        """
        principal = request.principal
        capability_set = merge_capabilities(principal.roles)

        tenant = None
        if principal.tenant_id is not None:
            t = get_tenant_or_none(tenant_id=principal.tenant_id)
            if t is not None:
                tenant = {"id": str(t.id), "code": t.code, "name": t.name, "status": t.status}

        return Response(
            {
                "user": {
                    "id": request.user.id,
                    "username": getattr(request.user, "username", None),
                    "email": getattr(request.user, "email", None) or None,
                },
                "principal": {
                    "kind": principal.kind,
                    "tenant_id": str(principal.tenant_id) if principal.tenant_id else None,
                    "patient_id": str(principal.patient_id) if principal.patient_id else None,
                    "roles": list(principal.roles),
                },
                "tenant": tenant,
                "capabilities": capability_set.as_list(),
                "navigation": [c.as_dict() for c in capability_set.navigation()],
                "server_time": timezone.now().isoformat(),
            },
            status=status.HTTP_200_OK,
        )
