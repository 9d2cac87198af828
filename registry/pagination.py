from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .constants import AUDIT_LOG_PAGE_SIZE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class RegistryPagination(PageNumberPagination):
    """
    ?page=&limit= pagination wrapped in the API envelope:
    {"success": true, "data": [...], "pagination": {page, limit, total, pages}}

    Out-of-range pages are clamped instead of returning 404.
    """
    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = 'limit'
    max_page_size = MAX_PAGE_SIZE

    def get_page_number(self, request, paginator):
        raw = request.query_params.get(self.page_query_param) or 1
        if raw in self.last_page_strings:
            return paginator.num_pages
        try:
            number = int(raw)
        except (TypeError, ValueError):
            number = 1
        return min(max(number, 1), paginator.num_pages)

    def get_paginated_response(self, data):
        return Response({
            'success': True,
            'data': data,
            'pagination': {
                'page': self.page.number,
                'limit': self.page.paginator.per_page,
                'total': self.page.paginator.count,
                'pages': self.page.paginator.num_pages if self.page.paginator.count else 0,
            },
        })


class AuditLogPagination(RegistryPagination):
    page_size = AUDIT_LOG_PAGE_SIZE
