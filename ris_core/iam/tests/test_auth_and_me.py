# ris_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from ris_core.accounts.models import AccountStatus
from ris_core.accounts.services import UserDirectory
from ris_core.conftest import PASSWORD

pytestmark = pytest.mark.django_db


def _login(client, username, password=PASSWORD):
    return client.post("/api/v1/auth/login/", {"username": username, "password": password}, format="json")


def test_me_requires_auth():
    res = APIClient().get("/api/v1/me/")
    assert res.status_code == 401


def test_login_sets_cookies(staff_user, settings):
    c = APIClient()
    res = _login(c, staff_user.username)
    assert res.status_code == 200
    assert res.json()["user"]["username"] == staff_user.username

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies
    assert res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]]["httponly"]


def test_cookie_session_reaches_me(staff_user, facility):
    UserDirectory.update(actor_id=None, user_id=staff_user.id, data={"facility_id": str(facility.id)})

    c = APIClient()
    _login(c, staff_user.username)

    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == str(staff_user.id)
    assert body["facility"]["id"] == str(facility.id)


def test_bearer_token_reaches_me(staff_user):
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(staff_user).access_token}")

    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["username"] == staff_user.username


def test_login_failures(staff_user):
    c = APIClient()

    res = _login(c, staff_user.username, "Wr0ng!Pass")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "invalid_credentials"

    res = _login(c, "nobody")
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Invalid username or password."

    UserDirectory.update(actor_id=None, user_id=staff_user.id, data={"status": AccountStatus.INACTIVE})
    res = _login(c, staff_user.username)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "account_inactive"


def test_token_rejected_after_soft_delete(staff_user):
    access = RefreshToken.for_user(staff_user).access_token
    UserDirectory.soft_delete(actor_id=None, user_id=staff_user.id)

    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    assert c.get("/api/v1/me/").status_code == 401


def test_refresh_and_logout(staff_user, settings):
    c = APIClient()
    _login(c, staff_user.username)

    res = c.post("/api/v1/auth/refresh/")
    assert res.status_code == 200
    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies

    res = c.post("/api/v1/auth/logout/")
    assert res.status_code == 200
    assert res.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value == ""


def test_refresh_without_cookie():
    res = APIClient().post("/api/v1/auth/refresh/")
    assert res.status_code == 401
