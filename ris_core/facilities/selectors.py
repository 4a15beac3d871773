# ris_core/facilities/selectors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from django.db.models import Count, QuerySet

from ris_core.associations.resolver import UserSummary, resolve_audit_user, resolve_or_none
from ris_core.common.api.exceptions import EntityNotFound
from ris_core.facilities.models import Facility


@dataclass(frozen=True)
class FacilityWithAudit:
    facility: Facility
    created_by_user: Optional[UserSummary]
    modified_by_user: Optional[UserSummary]


@dataclass(frozen=True)
class FacilityStats:
    total: int
    by_type: dict[str, int]
    by_status: dict[str, int]
    by_integration_status: dict[str, int]


def get_facility(*, facility_id: UUID) -> Facility:
    facility = Facility.objects.filter(id=facility_id).first()
    if facility is None:
        raise EntityNotFound("Facility", facility_id)
    return facility


def get_with_audit(*, facility_id: UUID) -> FacilityWithAudit:
    """Facility plus its creator/modifier summaries; a dangling audit link reads as None."""
    facility = get_facility(facility_id=facility_id)
    return FacilityWithAudit(
        facility=facility,
        created_by_user=resolve_or_none(resolve_audit_user, facility.created_by),
        modified_by_user=resolve_or_none(resolve_audit_user, facility.modified_by),
    )


def list_facilities() -> QuerySet[Facility]:
    """Newest first; query-param filtering is layered on by api.filters.FacilityFilter."""
    return Facility.objects.all().order_by("-created_at", "facility_name")


def _grouped(column: str) -> dict[str, int]:
    rows = Facility.objects.values(column).annotate(count=Count("id")).order_by(column)
    return {row[column]: row["count"] for row in rows}


def facility_stats() -> FacilityStats:
    return FacilityStats(
        total=Facility.objects.count(),
        by_type=_grouped("facility_type"),
        by_status=_grouped("status"),
        by_integration_status=_grouped("integration_status"),
    )
