# ris_core/common/permissions.py
from __future__ import annotations

from rest_framework.permissions import SAFE_METHODS, BasePermission


def is_directory_admin(user) -> bool:
    """
    Administrative actors manage staff accounts and facilities.
    Superusers and staff (is_staff) qualify.
    """
    return bool(
        user
        and getattr(user, "is_authenticated", False)
        and (getattr(user, "is_superuser", False) or getattr(user, "is_staff", False))
    )


class IsDirectoryAdminOrReadOnly(BasePermission):
    """
    - Authenticated users can read.
    - Writes need a directory admin.
    """

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return is_directory_admin(user)


class IsDirectoryAdminOrSelf(BasePermission):
    """
    Staff account endpoints:
    - list/create: authenticated read, admin create
    - object endpoints: admin, or the account holder acting on their own record
    """

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        if getattr(view, "action", None) == "create":
            return is_directory_admin(user)
        return True

    def has_object_permission(self, request, view, obj) -> bool:
        user = request.user
        if is_directory_admin(user):
            return True
        if request.method in SAFE_METHODS:
            return True
        return str(getattr(obj, "id", "")) == str(user.id) and getattr(view, "action", None) != "destroy"
