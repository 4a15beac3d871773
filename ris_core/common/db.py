# ris_core/common/db.py
from __future__ import annotations

from django.db import IntegrityError

# Postgres: "duplicate key value violates unique constraint ..."
# SQLite: "UNIQUE constraint failed: ..."
_UNIQUE_VIOLATION_MARKERS = ("unique constraint", "duplicate key")


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the store rejected a write for clashing with a unique index."""
    message = str(exc).lower()
    return any(marker in message for marker in _UNIQUE_VIOLATION_MARKERS)
