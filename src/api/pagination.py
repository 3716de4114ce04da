from math import ceil
from typing import Any, Sequence

from django.db.models import QuerySet


def _positive_int(raw, default: int) -> int:
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return default


class Paginator:
    """
    Page-number pagination shared by every list endpoint.

        items, meta = Paginator(default_page_size=20).paginate_queryset(qs, request)
        return self.create_response(message="...", data={"items": [...], "pagination": meta})

    `page` and `page_size` come from the query string; the size is capped at
    `max_page_size`. Out-of-range pages return an empty item list, never an error.
    """

    page_param = "page"
    page_size_param = "page_size"

    def __init__(self, *, default_page_size: int = 20, max_page_size: int = 100):
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def _requested(self, request) -> tuple[int, int]:
        page = _positive_int(request.GET.get(self.page_param), 1)
        size = _positive_int(request.GET.get(self.page_size_param), self.default_page_size)
        return page, min(size, self.max_page_size)

    def _page_url(self, request, page: int) -> str:
        query = request.GET.copy()
        query[self.page_param] = str(page)
        return request.build_absolute_uri(f"{request.path}?{query.urlencode()}")

    def paginate_queryset(self, data: QuerySet | Sequence[Any], request) -> tuple[list[Any], dict[str, Any]]:
        page, size = self._requested(request)
        total = data.count() if isinstance(data, QuerySet) else len(data)

        offset = (page - 1) * size
        items = list(data[offset:offset + size])

        total_pages = max(1, ceil(total / size))
        has_next = page < total_pages
        has_prev = page > 1

        return items, {
            "count": total,
            "page": page,
            "page_size": size,
            "total_pages": total_pages,
            "has_next": has_next,
            "has_prev": has_prev,
            "next_page": page + 1 if has_next else None,
            "prev_page": page - 1 if has_prev else None,
            "next_url": self._page_url(request, page + 1) if has_next else None,
            "prev_url": self._page_url(request, page - 1) if has_prev else None,
        }
