# ris_core/accounts/selectors.py
from __future__ import annotations

from typing import Any
from uuid import UUID

from django.db.models import Q, QuerySet

from ris_core.accounts.models import User
from ris_core.associations.resolver import facility_reference
from ris_core.common.api.exceptions import EntityNotFound


def get_user(*, user_id: UUID, include_deleted: bool = False) -> User:
    manager = User.all_objects if include_deleted else User.objects
    user = manager.filter(id=user_id).first()
    if user is None:
        raise EntityNotFound("User", user_id)
    return user


def list_users(
    *,
    role: str | None = None,
    status: str | None = None,
    facility_id: Any = None,
    search: str | None = None,
) -> QuerySet[User]:
    """
    Live accounts only. `search` is a case-insensitive substring match over
    full name, email and username.
    """
    qs = User.objects.all()

    if role:
        qs = qs.filter(role=role)
    if status:
        qs = qs.filter(status=status)
    if facility_id:
        qs = qs.filter(facility_id=facility_reference(facility_id))

    term = (search or "").strip()
    if term:
        qs = qs.filter(
            Q(full_name__icontains=term)
            | Q(email__icontains=term)
            | Q(username__icontains=term)
        )

    return qs.order_by("-created_at", "username")
