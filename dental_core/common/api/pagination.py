# dental_core/common/api/pagination.py
from __future__ import annotations

from rest_framework.pagination import BasePagination, CursorPagination, PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    page_size = 25
    page_size_query_param = "page_size"
    max_page_size = 200


class MovementLogPagination(CursorPagination):
    """
    Append-only logs grow while being read; a cursor keeps pages stable where page
    numbers would shift. Contract: { next, previous, results }.
    """
    page_size = 50
    page_size_query_param = "page_size"
    max_page_size = 200
    ordering = ("-created_at", "-id")


def paginate(request, queryset, serializer_class, *, paginator: BasePagination | None = None) -> Response:
    """
    Shared pagination helper. With the default paginator the contract is
      { count, next, previous, results }
    """
    p = paginator or DefaultPagination()
    page = p.paginate_queryset(queryset, request)
    if page is not None:
        ser = serializer_class(page, many=True)
        return p.get_paginated_response(ser.data)

    ser = serializer_class(queryset, many=True)
    return Response(ser.data)
