# ris_core/accounts/tests/test_uniqueness.py
import pytest
from django.db import IntegrityError

from ris_core.accounts.services import UserDirectory
from ris_core.accounts.uniqueness import (
    classify_integrity_error,
    ensure_identity_available,
    is_available,
)
from ris_core.common.api.exceptions import DuplicateIdentity, StorageFailure
from ris_core.conftest import make_user

pytestmark = pytest.mark.django_db


def test_email_check_is_case_insensitive(staff_user):
    assert not is_available("email", "TECH.ONE@example.COM")
    assert is_available("email", "someone.else@example.com")


def test_exclude_id_skips_own_record(staff_user):
    assert is_available("username", staff_user.username, exclude_id=staff_user.id)
    assert not is_available("username", staff_user.username)


def test_soft_deleted_accounts_release_identity(staff_user):
    UserDirectory.soft_delete(actor_id=None, user_id=staff_user.id)

    assert is_available("email", staff_user.email)
    assert is_available("mobile_number", staff_user.mobile_number)
    assert is_available("username", staff_user.username)


def test_first_conflicting_field_wins():
    make_user()

    with pytest.raises(DuplicateIdentity) as ei:
        ensure_identity_available(
            email="tech.one@example.com",
            mobile_number="9000000001",
            username="tech.one",
        )
    assert ei.value.field == "email"

    with pytest.raises(DuplicateIdentity) as ei:
        ensure_identity_available(email="fresh@example.com", mobile_number="9000000001", username="tech.one")
    assert ei.value.field == "mobile_number"

    with pytest.raises(DuplicateIdentity) as ei:
        ensure_identity_available(email="fresh@example.com", mobile_number="9999999999", username="tech.one")
    assert ei.value.field == "username"


@pytest.mark.parametrize(
    "message,field",
    [
        ('duplicate key value violates unique constraint "uq_user_email_live"', "email"),
        ("UNIQUE constraint failed: accounts_user.mobile_number", "mobile_number"),
        ('duplicate key value violates unique constraint "uq_user_username_live"', "username"),
    ],
)
def test_store_violations_map_to_duplicate_identity(message, field):
    err = classify_integrity_error(IntegrityError(message))
    assert isinstance(err, DuplicateIdentity)
    assert err.field == field


def test_unknown_store_violation_is_opaque():
    err = classify_integrity_error(IntegrityError("NOT NULL constraint failed: accounts_user.full_name"))
    assert isinstance(err, StorageFailure)
    assert "full_name" not in str(err.detail)


def test_non_unique_violation_naming_an_identity_column_is_opaque():
    err = classify_integrity_error(IntegrityError("NOT NULL constraint failed: accounts_user.email"))
    assert isinstance(err, StorageFailure)


@pytest.fixture
def store_only_uniqueness(monkeypatch):
    """Let writes reach the database constraints without the pre-checks."""
    monkeypatch.setattr("ris_core.accounts.services.ensure_identity_available", lambda **kwargs: None)


@pytest.mark.parametrize(
    "clash,field",
    [
        ({"email": "TECH.ONE@example.com"}, "email"),
        ({"mobile_number": "9000000001"}, "mobile_number"),
        ({"username": "tech.one"}, "username"),
    ],
)
def test_store_constraint_reports_duplicate_identity_on_create(store_only_uniqueness, clash, field):
    make_user()
    fresh = {"username": "tech.two", "email": "tech.two@example.com", "mobile_number": "9000000002"}
    fresh.update(clash)

    with pytest.raises(DuplicateIdentity) as ei:
        make_user(**fresh)
    assert ei.value.field == field


def test_store_constraint_reports_duplicate_identity_on_update(store_only_uniqueness):
    first = make_user()
    second = make_user(username="tech.two", email="tech.two@example.com", mobile_number="9000000002")

    with pytest.raises(DuplicateIdentity) as ei:
        UserDirectory.update(actor_id=None, user_id=second.id, data={"mobile_number": first.mobile_number})
    assert ei.value.field == "mobile_number"
