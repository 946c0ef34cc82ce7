# dental_core/appointments/admin.py
from django.contrib import admin

from dental_core.appointments.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("service_name", "patient", "scheduled_at", "status", "doctor_user_id", "tenant_id")
    list_filter = ("status",)
    search_fields = ("service_name", "patient__full_name")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("-scheduled_at",)
