# ris_core/conftest.py
import pytest
from rest_framework.test import APIClient

from ris_core.accounts.models import Gender, StaffRole
from ris_core.accounts.services import UserDirectory
from ris_core.facilities.models import FacilityType
from ris_core.facilities.services import FacilityRegistry

PASSWORD = "Str0ng!Pass"


def technician_payload(**overrides):
    """Keyword arguments for UserDirectory.create describing a valid technician."""
    payload = {
        "username": "tech.one",
        "email": "tech.one@example.com",
        "mobile_number": "9000000001",
        "password": PASSWORD,
        "full_name": "Tech One",
        "gender": Gender.FEMALE,
        "role": StaffRole.TECHNICIAN,
        "role_fields": {
            "employee_id": "EMP-001",
            "department": ["CT", "MRI"],
            "qualification": "B.Sc Radiology",
        },
    }
    payload.update(overrides)
    return payload


def make_user(**overrides):
    return UserDirectory.create(actor_id=None, **technician_payload(**overrides))


def make_facility(**overrides):
    data = {
        "facility_name": "Main Imaging Center",
        "facility_code": "MIC-001",
        "facility_type": FacilityType.DIAGNOSTIC_CENTER,
        "city": "Pune",
    }
    data.update(overrides)
    return FacilityRegistry.create(actor_id=None, data=data)


@pytest.fixture
def admin_user(db):
    user = UserDirectory.create(
        actor_id=None,
        username="admin",
        email="admin@example.com",
        mobile_number="9111111111",
        password=PASSWORD,
        full_name="Directory Admin",
        gender=Gender.OTHER,
        role=StaffRole.RADIOLOGIST,
        role_fields={"doctor_id": "DOC-1", "registration_number": "REG-1", "specialty": "Radiology"},
    )
    user.is_staff = True
    user.is_superuser = True
    user.save(update_fields=["is_staff", "is_superuser"])
    return user


@pytest.fixture
def staff_user(db):
    return make_user()


@pytest.fixture
def facility(db):
    return make_facility()


@pytest.fixture
def api_client(admin_user):
    c = APIClient()
    c.force_authenticate(user=admin_user)
    return c


@pytest.fixture
def staff_client(staff_user):
    c = APIClient()
    c.force_authenticate(user=staff_user)
    return c
