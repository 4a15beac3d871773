# ris_core/facilities/tests/test_facility_registry.py
import pytest
from django.db import IntegrityError
from rest_framework.exceptions import ValidationError

from ris_core.accounts.services import UserDirectory
from ris_core.common.api.exceptions import DuplicateFacility, EntityNotFound, FacilityInUse, StorageFailure
from ris_core.conftest import make_facility, make_user
from ris_core.facilities.models import Facility, FacilityStatus, IntegrationStatus
from ris_core.facilities.selectors import facility_stats, get_with_audit
from ris_core.facilities.services import FacilityRegistry, _classify_integrity_error

pytestmark = pytest.mark.django_db


def test_create_defaults_and_audit(admin_user):
    facility = make_facility()
    assert facility.integration_status == IntegrationStatus.PENDING
    assert facility.status == FacilityStatus.ACTIVE
    assert facility.created_by is None

    other = FacilityRegistry.create(
        actor_id=admin_user.id,
        data={"facility_name": "Second Site", "facility_type": "Clinic"},
    )
    assert other.created_by == admin_user.id
    assert other.facility_code is None


def test_name_is_required():
    with pytest.raises(ValidationError):
        FacilityRegistry.create(actor_id=None, data={"facility_name": "  ", "facility_type": "Clinic"})


def test_duplicate_code_checked_before_name(facility):
    with pytest.raises(DuplicateFacility) as ei:
        make_facility(facility_name=facility.facility_name)
    assert ei.value.field == "facility_code"


def test_duplicate_name_is_case_insensitive(facility):
    with pytest.raises(DuplicateFacility) as ei:
        make_facility(facility_name="MAIN imaging center", facility_code="OTHER-1")
    assert ei.value.field == "facility_name"


@pytest.fixture
def store_only_uniqueness(monkeypatch):
    """Let writes reach the database constraints without the pre-checks."""
    monkeypatch.setattr("ris_core.facilities.services._code_taken", lambda *args, **kwargs: False)
    monkeypatch.setattr("ris_core.facilities.services._name_taken", lambda *args, **kwargs: False)


def test_store_constraint_reports_duplicate_code(facility, store_only_uniqueness):
    with pytest.raises(DuplicateFacility) as ei:
        make_facility(facility_name="Another Site")
    assert ei.value.field == "facility_code"


def test_store_constraint_reports_duplicate_name(facility, store_only_uniqueness):
    with pytest.raises(DuplicateFacility) as ei:
        make_facility(facility_name="MAIN imaging center", facility_code="OTHER-1")
    assert ei.value.field == "facility_name"

    other = make_facility(facility_name="Second Site", facility_code="SEC-1")
    with pytest.raises(DuplicateFacility) as ei:
        FacilityRegistry.update(actor_id=None, facility_id=other.id, data={"facility_name": "Main Imaging Center"})
    assert ei.value.field == "facility_name"


def test_non_unique_violation_on_facility_is_opaque():
    err = _classify_integrity_error(IntegrityError("NOT NULL constraint failed: facilities_facility.facility_code"))
    assert isinstance(err, StorageFailure)


def test_facilities_without_code_can_coexist():
    make_facility(facility_name="No Code A", facility_code="")
    make_facility(facility_name="No Code B", facility_code=None)
    assert Facility.objects.filter(facility_code__isnull=True).count() == 2


def test_update_rechecks_only_changed_fields(facility, admin_user):
    other = make_facility(facility_name="Other Site", facility_code="OTH-1")

    same = FacilityRegistry.update(
        actor_id=admin_user.id,
        facility_id=facility.id,
        data={"facility_name": facility.facility_name, "city": "Nagpur"},
    )
    assert same.city == "Nagpur"
    assert same.modified_by == admin_user.id

    with pytest.raises(DuplicateFacility) as ei:
        FacilityRegistry.update(actor_id=None, facility_id=other.id, data={"facility_code": "MIC-001"})
    assert ei.value.field == "facility_code"


def test_update_ignores_audit_fields(facility, admin_user):
    updated = FacilityRegistry.update(
        actor_id=admin_user.id,
        facility_id=facility.id,
        data={"created_by": admin_user.id, "id": "x", "header_text": "Report"},
    )
    assert updated.created_by is None
    assert updated.header_text == "Report"


def test_update_missing_facility():
    with pytest.raises(EntityNotFound):
        FacilityRegistry.update(
            actor_id=None,
            facility_id="5b0c1f0e-0000-4000-8000-000000000000",
            data={"city": "X"},
        )


def test_delete_blocked_while_staff_assigned(facility):
    make_user(facility_id=str(facility.id))
    make_user(
        username="tech.two",
        email="tech.two@example.com",
        mobile_number="9000000002",
        facility_id=str(facility.id),
    )

    with pytest.raises(FacilityInUse) as ei:
        FacilityRegistry.delete(actor_id=None, facility_id=facility.id)
    assert ei.value.count == 2
    assert "2 user(s)" in str(ei.value.detail)
    assert Facility.objects.filter(id=facility.id).exists()


def test_delete_allowed_once_staff_soft_deleted(facility):
    user = make_user(facility_id=str(facility.id))
    UserDirectory.soft_delete(actor_id=None, user_id=user.id)

    FacilityRegistry.delete(actor_id=None, facility_id=facility.id)
    assert not Facility.objects.filter(id=facility.id).exists()


def test_get_with_audit_resolves_deleted_creator(admin_user):
    facility = FacilityRegistry.create(
        actor_id=admin_user.id,
        data={"facility_name": "Audited Site", "facility_type": "Hospital"},
    )
    UserDirectory.soft_delete(actor_id=None, user_id=admin_user.id)

    detail = get_with_audit(facility_id=facility.id)
    assert detail.created_by_user.username == "admin"
    assert detail.modified_by_user is None


def test_stats_group_counts(facility):
    make_facility(facility_name="Clinic One", facility_code="CL-1", facility_type="Clinic", status="Inactive")

    stats = facility_stats()
    assert stats.total == 2
    assert stats.by_type == {"Clinic": 1, "Diagnostic Center": 1}
    assert stats.by_status == {"Active": 1, "Inactive": 1}
    assert stats.by_integration_status == {"Pending": 2}
