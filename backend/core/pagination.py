"""
Offset pagination shared by the admin listing and the public search.

Result shape::

    {'data': [...], 'pagination': {'page', 'page_size', 'total', 'total_pages'}}
"""
import math

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def paginate_queryset(queryset, page: int, page_size: int):
    """
    Slice ``queryset`` for the requested page.

    Returns ``(rows, pagination)``. Pages past the end yield an empty row list
    instead of being clamped to the last page.
    """
    offset = (page - 1) * page_size
    total = queryset.count()
    rows = list(queryset[offset:offset + page_size])
    pagination = {
        'page': page,
        'page_size': page_size,
        'total': total,
        'total_pages': math.ceil(total / page_size) if page_size else 0,
    }
    return rows, pagination


def paginated_response_data(data, pagination):
    return {'data': data, 'pagination': pagination}
