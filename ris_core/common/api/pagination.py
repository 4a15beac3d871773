# ris_core/common/api/pagination.py
from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """
    Page contract shared by directory listings:
      { count, total_pages, current_page, page_size, has_next, has_previous,
        next, previous, results }
    """
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 200

    def get_paginated_response(self, data):
        page = self.page
        return Response(
            {
                "count": page.paginator.count,
                "total_pages": page.paginator.num_pages,
                "current_page": page.number,
                "page_size": page.paginator.per_page,
                "has_next": page.has_next(),
                "has_previous": page.has_previous(),
                "next": self.get_next_link(),
                "previous": self.get_previous_link(),
                "results": data,
            }
        )


def paginate(request, queryset, serializer_class, *, paginator: PageNumberPagination | None = None) -> Response:
    """
    Shared pagination helper so every list endpoint returns the same contract.
    """
    p = paginator or StandardPagination()
    page = p.paginate_queryset(queryset, request)
    if page is not None:
        ser = serializer_class(page, many=True)
        return p.get_paginated_response(ser.data)

    ser = serializer_class(queryset, many=True)
    return Response(ser.data)
