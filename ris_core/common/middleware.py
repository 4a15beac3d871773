# ris_core/common/middleware.py
from __future__ import annotations

import logging
import time

from django.utils.deprecation import MiddlewareMixin

from ris_core.common.api.exceptions import ensure_request_id

logger = logging.getLogger(__name__)


class RequestIdMiddleware(MiddlewareMixin):
    """
    Attaches a request id to every request and echoes it back as X-Request-ID.

    Behavior:
      - Honors an inbound X-Request-ID header if the caller supplied one.
      - The same id is reused by the error envelope (ensure_request_id).
      - API requests are logged with method, path, status and duration.
    """

    HEADER_META_KEY = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"
    LOGGED_PREFIXES = ("/api/", "/ris/api/")

    def process_request(self, request):
        inbound = (request.META.get(self.HEADER_META_KEY) or "").strip()
        if inbound:
            request.request_id = inbound[:64]
        ensure_request_id(request)
        request._started_at = time.monotonic()
        return None

    def process_response(self, request, response):
        rid = ensure_request_id(request)
        response[self.RESPONSE_HEADER] = rid

        path = getattr(request, "path", "") or ""
        if any(path.startswith(p) for p in self.LOGGED_PREFIXES):
            started = getattr(request, "_started_at", None)
            elapsed = time.monotonic() - started if started is not None else 0.0
            logger.info(
                "%s %s -> %s (%.3fs) rid=%s",
                request.method,
                path,
                response.status_code,
                elapsed,
                rid,
            )
        return response
