"""
Pagination for API list endpoints.

Keeps a consistent envelope across every list endpoint:
``{"results": [...], "pagination": {...}}``.
"""

from collections import OrderedDict

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsPagination(PageNumberPagination):
    """
    Page-number pagination with a client supplied ``per_page``.

    Usage:
        GET /api/products/?page=2&per_page=20
    """

    page_size = 50
    page_size_query_param = "per_page"
    max_page_size = 100

    def get_pagination_metadata(self):
        page = self.page
        return OrderedDict(
            [
                ("page", page.number),
                ("per_page", page.paginator.per_page),
                ("total_pages", page.paginator.num_pages),
                ("total_items", page.paginator.count),
                ("has_next", page.has_next()),
                ("has_previous", page.has_previous()),
                ("next_page", page.next_page_number() if page.has_next() else None),
                (
                    "previous_page",
                    page.previous_page_number() if page.has_previous() else None,
                ),
            ]
        )

    def get_paginated_response(self, data):
        return Response(
            OrderedDict(
                [
                    ("results", data),
                    ("pagination", self.get_pagination_metadata()),
                ]
            )
        )
