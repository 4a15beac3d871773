# ris_core/accounts/admin.py
from __future__ import annotations

from django.contrib import admin

from ris_core.accounts.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Read-mostly; account lifecycle goes through the users API."""
    list_display = ("username", "full_name", "email", "mobile_number", "role", "status", "facility_id", "created_at")
    list_filter = ("role", "status", "is_staff")
    search_fields = ("username", "full_name", "email", "mobile_number")
    ordering = ("-created_at",)
    readonly_fields = ("id", "password", "role_details", "last_login", "created_at", "updated_at", "deleted_at")
    exclude = ("groups", "user_permissions")
