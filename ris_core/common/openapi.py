# ris_core/common/openapi.py
from __future__ import annotations

from drf_spectacular.openapi import AutoSchema
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter


class RISAutoSchema(AutoSchema):
    """
    Adds the optional X-Request-ID header to every operation. The same id
    is echoed on the response and in error envelopes.
    """

    REQUEST_ID_HEADER = OpenApiParameter(
        name="X-Request-ID",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.HEADER,
        required=False,
        description="Client correlation id; generated server-side when absent.",
    )

    def get_override_parameters(self):
        params = list(super().get_override_parameters() or [])
        if not any(p.name.lower() == "x-request-id" for p in params):
            params.append(self.REQUEST_ID_HEADER)
        return params
