from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class AttemptPagination(PageNumberPagination):
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        page = self.page
        return Response({
            "data": data,
            "meta": {
                "total": page.paginator.count,
                "page_size": page.paginator.per_page,
                "current_page": page.number,
                "total_pages": page.paginator.num_pages,
                "has_next_page": page.has_next(),
                "has_previous_page": page.has_previous(),
            },
        })
