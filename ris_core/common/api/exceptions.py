# ris_core/common/api/exceptions.py
from __future__ import annotations

import logging
import uuid
from typing import Any

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, NotAuthenticated, PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def ensure_request_id(request) -> str:
    """
    Ensures request has a stable request_id attribute and returns it.
    Safe to call from middleware and DRF exception handler.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    """
    Canonical error envelope for the RIS directory API.
    Reusable from Django middleware (JsonResponse) and DRF (Response).
    """
    rid = ensure_request_id(request)
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": rid,
        }
    }


class DomainError(APIException):
    """
    Base for typed failures raised by services/selectors.

    `extra` carries structured details (field names, counts, ids) that are
    copied verbatim into the envelope's "details" slot.
    """
    extra: dict[str, Any] | None = None

    def __init__(self, detail=None, code=None, extra: dict[str, Any] | None = None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)
        self.extra = extra


class ConflictError(DomainError):
    """
    409 Conflict that still flows through the global exception handler.
    Use when business rules block an action.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


IDENTITY_LABELS = {
    "email": "Email",
    "username": "Username",
    "mobile_number": "Mobile number",
}


class DuplicateIdentity(ConflictError):
    default_detail = "Identity already in use."
    default_code = "duplicate_identity"

    def __init__(self, field: str):
        self.field = field
        label = IDENTITY_LABELS.get(field, field)
        super().__init__(detail=f"{label} already exists.", extra={"field": field})


FACILITY_LABELS = {
    "facility_code": "Facility code already exists.",
    "facility_name": "Facility with this name already exists.",
}


class DuplicateFacility(ConflictError):
    default_detail = "Facility already exists."
    default_code = "duplicate_facility"

    def __init__(self, field: str):
        self.field = field
        super().__init__(detail=FACILITY_LABELS.get(field, self.default_detail), extra={"field": field})


class FacilityInUse(ConflictError):
    """
    `count` covers live accounts only. Soft-deleted accounts keep their
    facility_id and resolve to no facility once it is gone.
    """
    default_detail = "Facility is in use."
    default_code = "facility_in_use"

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            detail=f"Cannot delete facility. {count} user(s) are associated with this facility.",
            extra={"count": count},
        )


class EntityNotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(detail=f"{entity} not found.", extra={"entity": entity, "id": str(entity_id)})


class InvalidCredentials(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid username or password."
    default_code = "invalid_credentials"


class AccountInactive(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Account is inactive."
    default_code = "account_inactive"


class StorageFailure(DomainError):
    """
    Unexpected persistence error. The original exception is logged where it
    is caught; callers only ever see this opaque message.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "The request could not be completed."
    default_code = "storage_failure"


def _code_for(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, NotAuthenticated):
        return "not_authenticated"
    if isinstance(exc, PermissionDenied):
        return "permission_denied"
    if isinstance(exc, Http404):
        return "not_found"
    if isinstance(exc, APIException):
        return getattr(exc, "default_code", "api_error") or "api_error"
    if http_status >= 500:
        return "server_error"
    return "error"


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    response = drf_exception_handler(exc, context)

    # Truly unhandled error
    if response is None:
        logger.exception("Unhandled API error", exc_info=exc)
        return Response(
            build_error_envelope(
                request=request,
                code="server_error",
                message="Unexpected server error.",
                details=None,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    http_status = response.status_code
    code = _code_for(exc, http_status)

    data = response.data

    # Message + details rules:
    # 1) {"detail": "..."} only -> message=detail, details=None
    # 2) {"detail": "...", ...} -> message=detail, details={...without detail}
    # 3) otherwise -> message="Request failed.", details=data
    # Domain errors override details with their structured extra.
    message = "Request failed."
    details = data

    if isinstance(data, dict) and "detail" in data:
        message = str(data.get("detail"))
        rest = {k: v for k, v in data.items() if k != "detail"}
        details = rest or None

    if isinstance(exc, DomainError) and exc.extra is not None:
        details = exc.extra

    return Response(
        build_error_envelope(
            request=request,
            code=code,
            message=message,
            details=details,
        ),
        status=http_status,
        headers=response.headers,
    )
