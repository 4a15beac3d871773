# ris_core/associations/resolver.py
"""
Association resolver.

Links between staff and facilities are logical, not foreign keys:
  - accounts.User.facility_id (string) -> facilities.Facility.id (UUID)
  - facilities.Facility.created_by / modified_by (UUID) -> accounts.User.id

Every link is resolved by an explicit lookup here. A reference that does
not resolve (malformed, deleted, never existed) raises AssociationNotFound
for that one link; callers that are assembling a larger read model use
resolve_or_none() so a dangling link never fails the parent fetch.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar
from uuid import UUID

from ris_core.accounts.models import User
from ris_core.common.api.exceptions import EntityNotFound
from ris_core.facilities.models import Facility

T = TypeVar("T")


class AssociationNotFound(EntityNotFound):
    default_code = "association_not_found"


@dataclass(frozen=True)
class UserSummary:
    id: UUID
    username: str
    full_name: str
    email: str
    role: str
    status: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            email=user.email,
            role=user.role,
            status=user.status,
        )


def _as_uuid(value: Any) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        return None


def facility_reference(facility_id: Any) -> str:
    """Canonical string form stored in accounts.User.facility_id."""
    parsed = _as_uuid(facility_id)
    return str(parsed) if parsed is not None else str(facility_id)


def resolve_facility(user_facility_id: Any) -> Facility:
    parsed = _as_uuid(user_facility_id)
    facility = Facility.objects.filter(id=parsed).first() if parsed is not None else None
    if facility is None:
        raise AssociationNotFound("Facility", user_facility_id)
    return facility


def resolve_staff(facility_id: Any) -> list[UserSummary]:
    """Live staff whose facility_id points at this facility."""
    qs = User.objects.filter(facility_id=facility_reference(facility_id)).order_by("full_name", "username")
    return [UserSummary.from_user(u) for u in qs]


def count_staff(facility_id: Any) -> int:
    """Live accounts pointing at the facility; soft-deleted ones are not counted."""
    return User.objects.filter(facility_id=facility_reference(facility_id)).count()


def resolve_audit_user(user_id: Any) -> UserSummary:
    """
    Audit links keep pointing at accounts after they are soft deleted, so
    this lookup deliberately reads through User.all_objects.
    """
    parsed = _as_uuid(user_id)
    user = User.all_objects.filter(id=parsed).first() if parsed is not None else None
    if user is None:
        raise AssociationNotFound("User", user_id)
    return UserSummary.from_user(user)


def resolve_or_none(resolver: Callable[[Any], T], value: Any) -> Optional[T]:
    if value is None or value == "":
        return None
    try:
        return resolver(value)
    except AssociationNotFound:
        return None
