# ris_core/associations/tests/test_resolver.py
import pytest

from ris_core.accounts.services import UserDirectory
from ris_core.associations.resolver import (
    AssociationNotFound,
    count_staff,
    resolve_audit_user,
    resolve_facility,
    resolve_or_none,
    resolve_staff,
)
from ris_core.conftest import make_user

pytestmark = pytest.mark.django_db


def test_resolve_facility_by_string_id(facility):
    assert resolve_facility(str(facility.id)).id == facility.id


@pytest.mark.parametrize("ref", ["", "garbage", "5b0c1f0e-0000-4000-8000-000000000000"])
def test_unresolvable_facility_reference(ref):
    with pytest.raises(AssociationNotFound):
        resolve_facility(ref)
    assert resolve_or_none(resolve_facility, ref) is None


def test_staff_lookup_ignores_soft_deleted(facility):
    kept = make_user(facility_id=str(facility.id), full_name="Zed")
    gone = make_user(
        username="tech.two",
        email="tech.two@example.com",
        mobile_number="9000000002",
        full_name="Amy",
        facility_id=str(facility.id),
    )
    UserDirectory.soft_delete(actor_id=None, user_id=gone.id)

    assert [s.id for s in resolve_staff(facility.id)] == [kept.id]
    assert count_staff(str(facility.id)) == 1


def test_audit_lookup_sees_soft_deleted(staff_user):
    UserDirectory.soft_delete(actor_id=None, user_id=staff_user.id)

    summary = resolve_audit_user(staff_user.id)
    assert summary.username == staff_user.username

    with pytest.raises(AssociationNotFound):
        resolve_audit_user("5b0c1f0e-0000-4000-8000-000000000000")
