# ris_core/facilities/api/filters.py
from __future__ import annotations

import django_filters

from ris_core.facilities.models import Facility, FacilityStatus, FacilityType, IntegrationStatus


class FacilityFilter(django_filters.FilterSet):
    facility_type = django_filters.ChoiceFilter(choices=FacilityType.choices)
    status = django_filters.ChoiceFilter(choices=FacilityStatus.choices)
    integration_status = django_filters.ChoiceFilter(choices=IntegrationStatus.choices)

    class Meta:
        model = Facility
        fields = ["facility_type", "status", "integration_status"]
