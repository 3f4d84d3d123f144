"""
Unauthenticated storefront endpoints.

Only available vehicles are ever visible here; lookup lists are cached and
dropped by the signals in ``backend.core.cache_signals``.
"""
import logging
from rest_framework.decorators import api_view, permission_classes, authentication_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from backend.catalog.models import Category, Brand
from backend.catalog.serializers import BrandSerializer
from backend.core.cache_utils import (
    cached_query, LOOKUP_LIST_CACHE_TTL,
    CATEGORIES_LIST_PREFIX, BRANDS_LIST_PREFIX, STORES_LIST_PREFIX,
)
from backend.core.exceptions import NotFound
from backend.core.pagination import paginated_response_data
from backend.inventory.filters import PublicVehicleFilter
from backend.inventory.models import Vehicle
from backend.inventory.search import search_vehicles, vehicle_queryset
from backend.locations.models import Store
from backend.locations.scoping import ListingScope
from backend.locations.serializers import PublicStoreSerializer
from .serializers import PublicVehicleListSerializer, PublicVehicleDetailSerializer

logger = logging.getLogger('backend.public')


class PublicSearchThrottle(AnonRateThrottle):
    scope = 'public_search'


def available_vehicles():
    return vehicle_queryset().filter(status=Vehicle.STATUS_AVAILABLE)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([PublicSearchThrottle])
def vehicle_search(request):
    """Search available vehicles across every store"""
    rows, pagination = search_vehicles(
        request.query_params, ListingScope(), queryset=available_vehicles(),
        filterset_class=PublicVehicleFilter,
    )
    return Response(paginated_response_data(PublicVehicleListSerializer(rows, many=True).data, pagination))


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def vehicle_detail(request, pk):
    """Available vehicle with nested relations; anything else is a 404"""
    try:
        vehicle = available_vehicles().get(pk=pk)
    except Vehicle.DoesNotExist:
        raise NotFound('Vehicle not found.')
    return Response(PublicVehicleDetailSerializer(vehicle).data)


@cached_query(cache_ttl=LOOKUP_LIST_CACHE_TTL, key_prefix=CATEGORIES_LIST_PREFIX)
def active_category_rows():
    return list(Category.objects.filter(active=True).order_by('name').values('id', 'name', 'icon', 'active'))


@cached_query(cache_ttl=LOOKUP_LIST_CACHE_TTL, key_prefix=BRANDS_LIST_PREFIX)
def brand_rows():
    return [
        {key: row[key] for key in ('id', 'brand_fipe_id', 'name', 'logo')}
        for row in BrandSerializer(Brand.objects.order_by('name'), many=True).data
    ]


@cached_query(cache_ttl=LOOKUP_LIST_CACHE_TTL, key_prefix=STORES_LIST_PREFIX)
def store_rows():
    stores = Store.objects.select_related('parent').order_by('name')
    return list(PublicStoreSerializer(stores, many=True).data)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def category_list(request):
    return Response(active_category_rows())


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def brand_list(request):
    return Response(brand_rows())


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def model_list(request):
    """Distinct models that currently have available vehicles"""
    rows = (
        Vehicle.objects.filter(status=Vehicle.STATUS_AVAILABLE)
        .values('model__model_fipe_id', 'model__name', 'brand__brand_fipe_id', 'brand__name', 'brand__logo')
        .distinct()
        .order_by('brand__name', 'model__name')
    )
    return Response([
        {
            'model_fipe_id': row['model__model_fipe_id'],
            'model_name': row['model__name'],
            'brand_fipe_id': row['brand__brand_fipe_id'],
            'brand_name': row['brand__name'],
            'brand_logo': row['brand__logo'],
        }
        for row in rows
    ])


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def store_list(request):
    return Response(store_rows())
