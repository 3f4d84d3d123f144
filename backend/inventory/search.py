"""
Vehicle search: scope restriction, filtering, ordering and pagination.

The pipeline is always the same: start from live vehicles with their
relations, intersect with the caller's listing scope, apply the conjunctive
filters, order by one whitelisted column (no tie-breaker) and slice the page.
"""
import logging

from django.db.models import Prefetch
from rest_framework import serializers

from backend.core.exceptions import InvalidInput
from backend.core.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, paginate_queryset
from .filters import VehicleFilter
from .models import Vehicle, VehiclePhoto

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    'created_at': 'created_at',
    'price': 'price',
    'model_year': 'model_year',
    'mileage': 'mileage',
}


class VehicleSearchSerializer(serializers.Serializer):
    """Sort and pagination parameters of a vehicle search"""
    sort = serializers.ChoiceField(choices=list(SORT_FIELDS), default='created_at')
    order = serializers.ChoiceField(choices=['asc', 'desc'], default='desc')
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=MAX_PAGE_SIZE, default=DEFAULT_PAGE_SIZE)


def vehicle_queryset():
    return Vehicle.objects.select_related('store', 'category', 'brand', 'model').prefetch_related(
        Prefetch('photos', queryset=VehiclePhoto.objects.order_by('display_order', 'id'))
    )


def _format_errors(errors):
    return '; '.join(
        f"{field}: {' '.join(str(m) for m in messages)}" for field, messages in errors.items()
    )


def parse_search_options(params):
    serializer = VehicleSearchSerializer(data={
        key: params[key] for key in ('sort', 'order', 'page', 'page_size')
        if key in params and params[key] != ''
    })
    if not serializer.is_valid():
        raise InvalidInput(_format_errors(serializer.errors))
    return serializer.validated_data


def search_vehicles(params, scope, queryset=None, filterset_class=VehicleFilter):
    """
    Run a search for ``params`` (a QueryDict or plain dict) within ``scope``.

    Returns ``(rows, pagination)``. Raises ``InvalidInput`` for malformed
    filter, sort or pagination values.
    """
    options = parse_search_options(params)

    if queryset is None:
        queryset = vehicle_queryset()
    queryset = scope.apply(queryset, 'store_id')

    filterset = filterset_class(params, queryset=queryset)
    if not filterset.is_valid():
        raise InvalidInput(_format_errors(filterset.errors))
    queryset = filterset.qs

    column = SORT_FIELDS[options['sort']]
    queryset = queryset.order_by(column if options['order'] == 'asc' else f'-{column}')

    rows, pagination = paginate_queryset(queryset, options['page'], options['page_size'])
    logger.debug(f"Vehicle search {dict(params)} -> {pagination['total']} rows")
    return rows, pagination
