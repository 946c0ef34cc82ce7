# dental_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers


class MeUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField(allow_null=True, required=False)
    email = serializers.EmailField(allow_null=True, required=False)


class CapabilitySerializer(serializers.Serializer):
    action = serializers.CharField()
    label = serializers.CharField(allow_null=True)
    href = serializers.CharField(allow_null=True)
    section = serializers.CharField(allow_null=True)


class TenantMiniSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    code = serializers.CharField()
    name = serializers.CharField()
    status = serializers.CharField()


class PrincipalSerializer(serializers.Serializer):
    kind = serializers.CharField()
    tenant_id = serializers.UUIDField(allow_null=True)
    patient_id = serializers.UUIDField(allow_null=True)
    roles = serializers.ListField(child=serializers.CharField())


class MeResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    principal = PrincipalSerializer()
    tenant = TenantMiniSerializer(allow_null=True, required=False)

    # UI gating payload: same resolver the permission layer uses
    capabilities = CapabilitySerializer(many=True)
    navigation = CapabilitySerializer(many=True)
    server_time = serializers.DateTimeField(required=False)
