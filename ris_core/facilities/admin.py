# ris_core/facilities/admin.py
from __future__ import annotations

from django.contrib import admin

from ris_core.facilities.models import Facility


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("facility_name", "facility_code", "facility_type", "city", "integration_status", "status")
    list_filter = ("facility_type", "status", "integration_status")
    search_fields = ("facility_name", "facility_code", "city")
    ordering = ("facility_name",)
    readonly_fields = ("id", "created_by", "modified_by", "created_at", "updated_at")
