# ris_core/accounts/uniqueness.py
"""
Identity uniqueness guard.

Email, username and mobile number must each be unique among live (not
soft-deleted) accounts. The checks here are the fast path; the partial
unique constraints on accounts_user are the real backstop, and
classify_integrity_error() maps their violations back to the same
DuplicateIdentity error a pre-check would have raised.
"""
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from django.db import IntegrityError

from ris_core.accounts.models import User
from ris_core.common.api.exceptions import DuplicateIdentity, StorageFailure
from ris_core.common.db import is_unique_violation

logger = logging.getLogger(__name__)

# Order matters: when several fields clash, the first one wins.
IDENTITY_FIELDS = ("email", "mobile_number", "username")

# Store-level markers for each field. Postgres reports the constraint name;
# SQLite reports the index name for expression indexes and table.column
# for plain ones.
_INTEGRITY_MARKERS = {
    "email": ("uq_user_email_live", "accounts_user.email"),
    "mobile_number": ("uq_user_mobile_live", "accounts_user.mobile_number"),
    "username": ("uq_user_username_live", "accounts_user.username"),
}


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def _lookup(field: str, value: str) -> dict:
    if field == "email":
        return {"email__iexact": normalize_email(value)}
    if field in ("username", "mobile_number"):
        return {field: value}
    raise ValueError(f"Unknown identity field: {field}")


def is_available(field: str, value: str, exclude_id: Optional[UUID] = None) -> bool:
    qs = User.objects.filter(**_lookup(field, value))
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return not qs.exists()


def ensure_available(field: str, value: str, exclude_id: Optional[UUID] = None) -> None:
    if not is_available(field, value, exclude_id=exclude_id):
        raise DuplicateIdentity(field)


def ensure_identity_available(
    *,
    email: Optional[str] = None,
    mobile_number: Optional[str] = None,
    username: Optional[str] = None,
    exclude_id: Optional[UUID] = None,
) -> None:
    """
    Check each supplied field in IDENTITY_FIELDS order and raise on the first
    conflict. Fields passed as None are skipped.
    """
    candidates = {"email": email, "mobile_number": mobile_number, "username": username}
    for field in IDENTITY_FIELDS:
        value = candidates[field]
        if value is None:
            continue
        ensure_available(field, value, exclude_id=exclude_id)


def classify_integrity_error(exc: IntegrityError) -> Exception:
    """
    Translate a unique-constraint violation raised by the store into the
    error a pre-check would have produced. Anything unrecognised becomes an
    opaque StorageFailure (the cause is logged).
    """
    message = str(exc)
    if is_unique_violation(exc):
        for field in IDENTITY_FIELDS:
            if any(marker in message for marker in _INTEGRITY_MARKERS[field]):
                return DuplicateIdentity(field)

    logger.error("Unclassified integrity error on accounts_user", exc_info=exc)
    return StorageFailure()
