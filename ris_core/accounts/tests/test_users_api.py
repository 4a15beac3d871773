# ris_core/accounts/tests/test_users_api.py
import pytest
from rest_framework.test import APIClient

from ris_core.accounts.models import User
from ris_core.accounts.services import UserDirectory
from ris_core.conftest import PASSWORD, make_user

pytestmark = pytest.mark.django_db

USERS_URL = "/api/v1/users/"


def _create_body(**overrides):
    body = {
        "username": "rad.one",
        "email": "rad.one@example.com",
        "mobile_number": "9222222222",
        "password": PASSWORD,
        "full_name": "Rad One",
        "gender": "Male",
        "role": "Radiologist",
        "doctor_id": "DOC-22",
        "registration_number": "REG-22",
        "specialty": "MSK",
        "reporting_modality_access": ["CT", "MR"],
    }
    body.update(overrides)
    return body


def test_users_require_auth():
    res = APIClient().get(USERS_URL)
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "not_authenticated"


def test_admin_creates_user(api_client, facility):
    res = api_client.post(USERS_URL, _create_body(facility_id=str(facility.id)), format="json")
    assert res.status_code == 201, res.json()

    body = res.json()
    assert body["status"] == "Active"
    assert body["facility_id"] == str(facility.id)
    assert body["role_details"] == {
        "doctor_id": "DOC-22",
        "registration_number": "REG-22",
        "specialty": "MSK",
        "reporting_modality_access": ["CT", "MR"],
    }
    assert "password" not in body


def test_create_accepts_nested_role_details(api_client):
    body = _create_body(role="FrontDesk", role_details={"assigned_counter": "C9", "shift_timing": "Night"})
    for key in ("doctor_id", "registration_number", "specialty", "reporting_modality_access"):
        body.pop(key)

    res = api_client.post(USERS_URL, body, format="json")
    assert res.status_code == 201, res.json()
    assert res.json()["role_details"] == {"assigned_counter": "C9", "shift_timing": "Night"}


def test_create_missing_role_field_is_validation_error(api_client):
    body = _create_body()
    body.pop("specialty")

    res = api_client.post(USERS_URL, body, format="json")
    assert res.status_code == 400
    err = res.json()["error"]
    assert err["code"] == "validation_error"
    assert "specialty" in err["details"]


def test_create_bad_mobile_number(api_client):
    res = api_client.post(USERS_URL, _create_body(mobile_number="12345"), format="json")
    assert res.status_code == 400
    assert "mobile_number" in res.json()["error"]["details"]


def test_create_duplicate_is_conflict(api_client, staff_user):
    res = api_client.post(USERS_URL, _create_body(email="TECH.ONE@example.com"), format="json")
    assert res.status_code == 409
    err = res.json()["error"]
    assert err["code"] == "duplicate_identity"
    assert err["message"] == "Email already exists."
    assert err["details"] == {"field": "email"}


def test_non_admin_cannot_create(staff_client):
    res = staff_client.post(USERS_URL, _create_body(), format="json")
    assert res.status_code == 403


def test_list_is_paginated(api_client):
    for i in range(3):
        make_user(username=f"user{i}", email=f"user{i}@example.com", mobile_number=f"900000010{i}")

    res = api_client.get(USERS_URL, {"limit": 2})
    assert res.status_code == 200
    body = res.json()
    # three technicians plus the admin
    assert body["count"] == 4
    assert body["total_pages"] == 2
    assert body["current_page"] == 1
    assert body["page_size"] == 2
    assert body["has_next"] is True
    assert body["has_previous"] is False
    assert len(body["results"]) == 2


def test_list_filters(api_client, staff_user):
    res = api_client.get(USERS_URL, {"role": "Technician", "search": "tech"})
    assert res.status_code == 200
    assert [u["username"] for u in res.json()["results"]] == ["tech.one"]


def test_retrieve_resolves_facility(api_client, facility):
    user = make_user(facility_id=str(facility.id))

    res = api_client.get(f"{USERS_URL}{user.id}/")
    assert res.status_code == 200
    assert res.json()["facility"]["facility_name"] == facility.facility_name


def test_retrieve_with_dangling_facility(api_client, staff_user):
    User.objects.filter(id=staff_user.id).update(facility_id="not-a-facility")

    res = api_client.get(f"{USERS_URL}{staff_user.id}/")
    assert res.status_code == 200
    assert res.json()["facility"] is None
    assert res.json()["facility_id"] == "not-a-facility"


def test_retrieve_unknown_and_malformed_ids(api_client):
    res = api_client.get(f"{USERS_URL}5b0c1f0e-0000-4000-8000-000000000000/")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "not_found"

    res = api_client.get(f"{USERS_URL}not-a-uuid/")
    assert res.status_code == 404


def test_patch_and_put_are_partial(api_client, staff_user):
    res = api_client.patch(f"{USERS_URL}{staff_user.id}/", {"full_name": "Patched"}, format="json")
    assert res.status_code == 200
    assert res.json()["full_name"] == "Patched"

    res = api_client.put(f"{USERS_URL}{staff_user.id}/", {"experience_years": 3}, format="json")
    assert res.status_code == 200
    assert res.json()["full_name"] == "Patched"
    assert res.json()["role_details"]["experience_years"] == 3


def test_empty_update_rejected(api_client, staff_user):
    res = api_client.patch(f"{USERS_URL}{staff_user.id}/", {}, format="json")
    assert res.status_code == 400


def test_self_service_limits(staff_client, staff_user, admin_user):
    res = staff_client.patch(f"{USERS_URL}{staff_user.id}/", {"full_name": "Me Myself"}, format="json")
    assert res.status_code == 200

    res = staff_client.patch(f"{USERS_URL}{staff_user.id}/", {"status": "Inactive"}, format="json")
    assert res.status_code == 403

    res = staff_client.patch(f"{USERS_URL}{admin_user.id}/", {"full_name": "Hijack"}, format="json")
    assert res.status_code == 403

    res = staff_client.patch(f"{USERS_URL}{staff_user.id}/", {"password": "N3w!Password"}, format="json")
    assert res.status_code == 403
    staff_user.refresh_from_db()
    assert staff_user.check_password(PASSWORD)

    res = staff_client.delete(f"{USERS_URL}{staff_user.id}/")
    assert res.status_code == 403


def test_delete_is_soft(api_client, staff_user):
    res = api_client.delete(f"{USERS_URL}{staff_user.id}/")
    assert res.status_code == 204

    res = api_client.get(f"{USERS_URL}{staff_user.id}/")
    assert res.status_code == 404
    assert User.all_objects.get(id=staff_user.id).is_deleted


def test_change_own_password(staff_client, staff_user, admin_user):
    url = f"{USERS_URL}{staff_user.id}/password/"

    res = staff_client.post(url, {"current_password": "wrong", "new_password": "N3w!Password"}, format="json")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "invalid_credentials"

    res = staff_client.post(url, {"current_password": PASSWORD, "new_password": "N3w!Password"}, format="json")
    assert res.status_code == 200
    assert UserDirectory.authenticate(username=staff_user.username, password="N3w!Password").id == staff_user.id

    res = staff_client.post(
        f"{USERS_URL}{admin_user.id}/password/",
        {"current_password": PASSWORD, "new_password": "N3w!Password"},
        format="json",
    )
    assert res.status_code == 403


def test_alias_prefix_serves_same_api(api_client, staff_user):
    res = api_client.get(f"/ris/api/users/{staff_user.id}/")
    assert res.status_code == 200
    assert res.json()["username"] == "tech.one"
