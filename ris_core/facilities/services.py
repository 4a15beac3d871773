# ris_core/facilities/services.py
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from ris_core.associations.resolver import count_staff
from ris_core.common.api.exceptions import DuplicateFacility, EntityNotFound, FacilityInUse, StorageFailure
from ris_core.common.db import is_unique_violation
from ris_core.facilities.models import Facility, FacilityStatus, IntegrationStatus

logger = logging.getLogger(__name__)

# Never writable through update().
IMMUTABLE_FIELDS = frozenset({"id", "created_by", "created_at", "updated_at", "modified_by"})

# Nullable columns: blank input is stored as NULL rather than "".
NULLABLE_FIELDS = frozenset({"facility_code", "pacs_ip_address", "pacs_port"})

EDITABLE_FIELDS = (
    "facility_name",
    "facility_code",
    "facility_type",
    "facility_description",
    "address_line_1",
    "address_line_2",
    "city",
    "state",
    "country",
    "pincode",
    "contact_number",
    "email_id",
    "letterhead_logo",
    "header_text",
    "footer_text",
    "pacs_ae_title",
    "pacs_ip_address",
    "pacs_port",
    "ris_url",
    "integration_status",
    "status",
)

_INTEGRITY_MARKERS = {
    "facility_code": ("uq_facility_code", "facilities_facility.facility_code"),
    "facility_name": ("uq_facility_name_ci",),
}


def _clean(field: str, value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
    if field in NULLABLE_FIELDS and value in ("", None):
        return None
    if value is None:
        return ""
    return value


def _code_taken(code: str, exclude_id: Optional[UUID] = None) -> bool:
    qs = Facility.objects.filter(facility_code=code)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()


def _name_taken(name: str, exclude_id: Optional[UUID] = None) -> bool:
    qs = Facility.objects.filter(facility_name__iexact=name)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()


def _classify_integrity_error(exc: IntegrityError) -> Exception:
    message = str(exc)
    if is_unique_violation(exc):
        for field, markers in _INTEGRITY_MARKERS.items():
            if any(m in message for m in markers):
                return DuplicateFacility(field)
    logger.error("Unclassified integrity error on facilities_facility", exc_info=exc)
    return StorageFailure()


def _save(facility: Facility, **save_kwargs) -> None:
    try:
        with transaction.atomic():
            facility.save(**save_kwargs)
    except IntegrityError as e:
        raise _classify_integrity_error(e)


class FacilityRegistry:
    @staticmethod
    @transaction.atomic
    def create(*, actor_id: UUID | None, data: Mapping[str, Any]) -> Facility:
        values = {f: _clean(f, data[f]) for f in EDITABLE_FIELDS if f in data}

        if not values.get("facility_name"):
            raise ValidationError({"facility_name": "This field is required."})

        code = values.get("facility_code")
        if code and _code_taken(code):
            raise DuplicateFacility("facility_code")
        if _name_taken(values["facility_name"]):
            raise DuplicateFacility("facility_name")

        values["integration_status"] = values.get("integration_status") or IntegrationStatus.PENDING
        values["status"] = values.get("status") or FacilityStatus.ACTIVE

        facility = Facility(**values, created_by=actor_id)
        _save(facility, force_insert=True)

        logger.info("facility.created id=%s name=%s actor=%s", facility.id, facility.facility_name, actor_id)
        return facility

    @staticmethod
    @transaction.atomic
    def update(*, actor_id: UUID | None, facility_id: UUID, data: Mapping[str, Any]) -> Facility:
        facility = Facility.objects.select_for_update().filter(id=facility_id).first()
        if facility is None:
            raise EntityNotFound("Facility", facility_id)

        updates = {
            f: _clean(f, v)
            for f, v in (data or {}).items()
            if f in EDITABLE_FIELDS and f not in IMMUTABLE_FIELDS
        }

        code = updates.get("facility_code")
        if code and code != facility.facility_code and _code_taken(code, exclude_id=facility.id):
            raise DuplicateFacility("facility_code")

        name = updates.get("facility_name")
        if name and name != facility.facility_name and _name_taken(name, exclude_id=facility.id):
            raise DuplicateFacility("facility_name")

        for field, value in updates.items():
            setattr(facility, field, value)
        facility.modified_by = actor_id

        _save(facility)

        logger.info("facility.updated id=%s fields=%s actor=%s", facility.id, sorted(updates), actor_id)
        return facility

    @staticmethod
    @transaction.atomic
    def delete(*, actor_id: UUID | None, facility_id: UUID) -> None:
        facility = Facility.objects.select_for_update().filter(id=facility_id).first()
        if facility is None:
            raise EntityNotFound("Facility", facility_id)

        in_use = count_staff(facility.id)
        if in_use > 0:
            logger.info("facility.delete_blocked id=%s staff=%s actor=%s", facility.id, in_use, actor_id)
            raise FacilityInUse(in_use)

        facility.delete()
        logger.info("facility.deleted id=%s actor=%s", facility_id, actor_id)
