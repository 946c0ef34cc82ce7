# dental_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from dental_core.iam.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "tenant", "kind", "roles", "is_active", "created_at")
    list_filter = ("kind", "is_active")
    search_fields = ("user__username", "user__email")
    ordering = ("-created_at",)
