# ris_core/accounts/backends.py
from __future__ import annotations

from django.contrib.auth.backends import BaseBackend

from ris_core.accounts.models import User
from ris_core.accounts.services import UserDirectory
from ris_core.common.api.exceptions import AccountInactive, InvalidCredentials


class DirectoryBackend(BaseBackend):
    """
    Django auth backend (admin login, django.contrib.auth.authenticate)
    delegating to UserDirectory.authenticate. Usernames are only unique
    among live accounts, which is why the default ModelBackend is not used.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None or password is None:
            return None
        try:
            return UserDirectory.authenticate(username=username, password=password)
        except (InvalidCredentials, AccountInactive):
            return None

    def get_user(self, user_id):
        user = User.objects.filter(id=user_id).first()
        if user is None or not user.is_active:
            return None
        return user

