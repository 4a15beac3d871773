# ris_core/accounts/services.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from ris_core.accounts.models import AccountStatus, User
from ris_core.accounts.roles import allowed_fields_for, build_role_details, details_to_dict
from ris_core.accounts.uniqueness import (
    IDENTITY_FIELDS,
    classify_integrity_error,
    ensure_identity_available,
    normalize_email,
)
from ris_core.accounts.validators import check_password_strength
from ris_core.associations.resolver import AssociationNotFound, resolve_facility
from ris_core.common.api.exceptions import AccountInactive, EntityNotFound, InvalidCredentials

logger = logging.getLogger(__name__)

# Never writable through update(), whatever the payload says.
IMMUTABLE_FIELDS = frozenset({"id", "is_deleted", "deleted_at", "created_at", "updated_at", "password_hash"})

PROFILE_FIELDS = ("username", "email", "mobile_number", "full_name", "gender", "date_of_birth", "status", "role")

INVALID_CREDENTIALS_MSG = "Invalid username or password."


def _facility_reference(facility_id: Any) -> Optional[str]:
    """Validate a submitted facility id through the resolver; blank clears it."""
    if facility_id is None or str(facility_id).strip() == "":
        return None
    try:
        facility = resolve_facility(facility_id)
    except AssociationNotFound:
        raise ValidationError({"facility_id": "Facility not found."})
    return str(facility.id)


def _save(user: User, **save_kwargs) -> None:
    """
    Persist inside a savepoint so a unique-constraint race can be caught and
    reported exactly like the pre-check would have reported it.
    """
    try:
        with transaction.atomic():
            user.save(**save_kwargs)
    except IntegrityError as e:
        raise classify_integrity_error(e)


class UserDirectory:
    """
    Lifecycle of staff accounts: create, update, soft delete, password
    rotation and credential checks.
    """

    @staticmethod
    @transaction.atomic
    def create(
        *,
        actor_id: UUID | None,
        username: str,
        email: str,
        mobile_number: str,
        password: str,
        full_name: str,
        gender: str,
        role: str,
        date_of_birth: date | None = None,
        facility_id: str | None = None,
        role_fields: Mapping[str, Any] | None = None,
    ) -> User:
        details = build_role_details(role, role_fields or {})
        check_password_strength(password)

        email = normalize_email(email)
        ensure_identity_available(email=email, mobile_number=mobile_number, username=username)

        user = User(
            username=username,
            email=email,
            mobile_number=mobile_number,
            full_name=full_name,
            gender=gender,
            date_of_birth=date_of_birth,
            role=role,
            role_details=details_to_dict(details),
            facility_id=_facility_reference(facility_id),
            status=AccountStatus.ACTIVE,
        )
        user.set_password(password)
        _save(user, force_insert=True)

        logger.info("user.created id=%s username=%s role=%s actor=%s", user.id, user.username, role, actor_id)
        return user

    @staticmethod
    @transaction.atomic
    def update(*, actor_id: UUID | None, user_id: UUID, data: Mapping[str, Any]) -> User:
        user = User.objects.select_for_update().filter(id=user_id).first()
        if user is None:
            raise EntityNotFound("User", user_id)

        updates = {k: v for k, v in (data or {}).items() if k not in IMMUTABLE_FIELDS}
        role_fields = dict(updates.pop("role_fields", None) or {})
        password = updates.pop("password", None)

        if "email" in updates and updates["email"] is not None:
            updates["email"] = normalize_email(updates["email"])

        changed_identity = {
            f: updates[f]
            for f in IDENTITY_FIELDS
            if f in updates and updates[f] is not None and updates[f] != getattr(user, f)
        }
        if changed_identity:
            ensure_identity_available(exclude_id=user.id, **changed_identity)

        new_role = updates.get("role") or user.role
        if new_role != user.role or role_fields:
            # Keep what still fits the (possibly new) role, overlay submitted values.
            allowed = allowed_fields_for(new_role)
            merged = {k: v for k, v in (user.role_details or {}).items() if k in allowed}
            merged.update(role_fields)
            user.role_details = details_to_dict(build_role_details(new_role, merged))

        if "facility_id" in updates:
            user.facility_id = _facility_reference(updates.pop("facility_id"))

        for field in PROFILE_FIELDS:
            if field in updates and updates[field] is not None:
                setattr(user, field, updates[field])
        if "date_of_birth" in updates and updates["date_of_birth"] is None:
            user.date_of_birth = None

        if password is not None:
            check_password_strength(password, user=user)
            user.set_password(password)

        _save(user)

        logger.info(
            "user.updated id=%s fields=%s password_rotated=%s actor=%s",
            user.id,
            sorted(set(updates) | set(role_fields)),
            password is not None,
            actor_id,
        )
        return user

    @staticmethod
    @transaction.atomic
    def soft_delete(*, actor_id: UUID | None, user_id: UUID) -> User:
        user = User.objects.select_for_update().filter(id=user_id).first()
        if user is None:
            raise EntityNotFound("User", user_id)

        user.is_deleted = True
        user.deleted_at = timezone.now()
        user.status = AccountStatus.INACTIVE
        user.save(update_fields=["is_deleted", "deleted_at", "status", "updated_at"])

        logger.info("user.soft_deleted id=%s actor=%s", user.id, actor_id)
        return user

    @staticmethod
    @transaction.atomic
    def change_password(*, user_id: UUID, current_password: str, new_password: str) -> User:
        user = User.objects.select_for_update().filter(id=user_id).first()
        if user is None:
            raise EntityNotFound("User", user_id)

        if not user.check_password(current_password):
            raise InvalidCredentials("Current password is incorrect.")

        check_password_strength(new_password, user=user, field="new_password")
        user.set_password(new_password)
        user.save(update_fields=["password", "updated_at"])

        logger.info("user.password_changed id=%s", user.id)
        return user

    @staticmethod
    def authenticate(*, username: str, password: str) -> User:
        user = User.objects.filter(username=username).first()
        if user is None:
            # Burn a hash anyway so unknown usernames cost the same as wrong passwords.
            User().set_password(password)
            logger.warning("auth.failed username=%s reason=unknown_user", username)
            raise InvalidCredentials(INVALID_CREDENTIALS_MSG)

        if user.status != AccountStatus.ACTIVE:
            logger.warning("auth.failed username=%s reason=inactive", username)
            raise AccountInactive()

        if not user.check_password(password):
            logger.warning("auth.failed username=%s reason=bad_password", username)
            raise InvalidCredentials(INVALID_CREDENTIALS_MSG)

        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])
        logger.info("auth.succeeded id=%s", user.id)
        return user
