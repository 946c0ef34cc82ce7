# dental_core/prescriptions/filters.py
from __future__ import annotations

import django_filters

from dental_core.prescriptions.models import Prescription, PrescriptionStatus


class PrescriptionFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=PrescriptionStatus.choices)
    patient = django_filters.UUIDFilter(field_name="patient_id")
    doctor = django_filters.NumberFilter(field_name="doctor_user_id")
    created_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lt")

    class Meta:
        model = Prescription
        fields = ["status", "patient", "doctor", "created_after", "created_before"]
