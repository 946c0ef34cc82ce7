# dental_core/tenants/admin.py
from django.contrib import admin

from dental_core.tenants.models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "status", "created_at", "updated_at")
    list_filter = ("status", "created_at")
    search_fields = ("name", "code")
    ordering = ("-created_at",)
    # status changes go through the lifecycle API so they are audited
    readonly_fields = ("id", "status", "created_at", "updated_at")

    fieldsets = (
        (None, {"fields": ("id", "name", "code", "status")}),
        ("Settings", {"fields": ("settings",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )
