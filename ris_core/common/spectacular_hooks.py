# ris_core/common/spectacular_hooks.py
from __future__ import annotations

LEGACY_PREFIX = "/ris/api/"


def preprocess_exclude_legacy_api(endpoints):
    """
    ROOT_URLCONF mounts the API twice:
      /api/v1/   (primary)
      /ris/api/  (alias kept for existing RIS clients)

    Without this hook drf-spectacular documents both, with duplicate paths
    and operationId suffixes (list2, retrieve2, ...).
    """
    return [
        (path, path_regex, method, callback)
        for path, path_regex, method, callback in endpoints
        if not path.startswith(LEGACY_PREFIX)
    ]
