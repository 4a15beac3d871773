# ris_core/common/tests/test_seed_directory.py
import pytest
from django.core.management import call_command

from ris_core.accounts.models import StaffRole, User
from ris_core.accounts.services import UserDirectory
from ris_core.facilities.models import Facility

pytestmark = pytest.mark.django_db


def test_seed_is_idempotent():
    call_command("seed_directory", "--admin-password", "Seed!Pass123")
    call_command("seed_directory", "--admin-password", "Seed!Pass123")

    assert set(Facility.objects.values_list("facility_code", flat=True)) == {"AP-HOS-001", "CDC-002"}

    admin = User.objects.get(username="admin")
    assert admin.is_superuser and admin.is_staff
    assert admin.role == StaffRole.RADIOLOGIST
    assert UserDirectory.authenticate(username="admin", password="Seed!Pass123").id == admin.id
