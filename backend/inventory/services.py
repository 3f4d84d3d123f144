"""
Vehicle record service.

Every operation takes the ``Caller`` of the request and leaves all store
permission decisions to ``backend.locations.scoping``. Lookups of a single
vehicle answer ``NotFound`` before any scope check, ``Forbidden`` only once
the vehicle is known to exist.
"""
import logging

from django.db import IntegrityError, transaction

from backend.catalog import services as taxonomy
from backend.catalog.models import Category, VehicleModel
from backend.core.exceptions import Conflict, InvalidInput, NotFound
from backend.core.pagination import paginated_response_data
from backend.locations.models import Store
from backend.locations.scoping import authorize_nested_resource, authorize_store_action, listing_scope
from .models import Vehicle
from .search import search_vehicles, vehicle_queryset
from .serializers import VehicleSerializer

logger = logging.getLogger('backend.inventory')

# Plain columns copied from the payload onto the vehicle
VEHICLE_FIELDS = (
    'vehicle_type', 'plate', 'manufacture_year', 'model_year', 'mileage', 'color', 'fuel_type',
    'price', 'fipe_code', 'fipe_value', 'description', 'status', 'home_highlight',
    'brand_highlight', 'features', 'specifications',
)


def list_vehicles(caller, params):
    """Back-office listing: caller's listing scope plus the search pipeline."""
    scope = listing_scope(caller)
    rows, pagination = search_vehicles(params, scope)
    return paginated_response_data(VehicleSerializer(rows, many=True).data, pagination)


def _load_vehicle(vehicle_id, for_update=False):
    queryset = vehicle_queryset()
    if for_update:
        queryset = Vehicle.objects.select_for_update()
    try:
        return queryset.get(pk=vehicle_id)
    except Vehicle.DoesNotExist:
        raise NotFound(f'Vehicle {vehicle_id} not found.')


def get_vehicle(caller, vehicle_id):
    vehicle = _load_vehicle(vehicle_id)
    authorize_nested_resource(caller, vehicle.store_id)
    return vehicle


def _ensure_unique_plate(plate, exclude_pk=None):
    # soft-deleted vehicles keep their plate
    qs = Vehicle.all_objects.filter(plate=plate)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        logger.warning(f"Duplicate plate rejected: {plate}")
        raise Conflict(f"A vehicle with plate '{plate}' already exists.")


def _lock_store(store_id):
    # same row lock as delete_store, held until commit
    try:
        return Store.objects.select_for_update().get(pk=store_id)
    except Store.DoesNotExist:
        raise NotFound(f'Store {store_id} not found.')


def _ensure_category(category_id):
    if not Category.objects.filter(pk=category_id).exists():
        raise NotFound(f'Category {category_id} not found.')


def _resolve_brand(data, current=None):
    if data.get('brand_id'):
        return taxonomy.get_brand(data['brand_id'])
    if data.get('brand_name'):
        return taxonomy.resolve_brand(data['brand_name'], data.get('brand_fipe_id'))
    return current


def _resolve_model(data, brand, current=None):
    if data.get('model_id'):
        try:
            vehicle_model = VehicleModel.objects.get(pk=data['model_id'])
        except VehicleModel.DoesNotExist:
            raise NotFound(f"Model {data['model_id']} not found.")
    elif data.get('model_name'):
        vehicle_model = taxonomy.resolve_model(brand, data['model_name'], data.get('model_fipe_id'))
    else:
        vehicle_model = current

    if vehicle_model.brand_id != brand.pk:
        raise InvalidInput(f"Model {vehicle_model.pk} does not belong to brand {brand.pk}.")
    return vehicle_model


def create_vehicle(caller, data):
    with transaction.atomic():
        _ensure_unique_plate(data['plate'])
        authorize_store_action(caller, data['store_id'], require_exists=True)
        _lock_store(data['store_id'])
        _ensure_category(data['category_id'])

        brand = _resolve_brand(data)
        vehicle_model = _resolve_model(data, brand)

        vehicle = Vehicle(
            store_id=data['store_id'],
            category_id=data['category_id'],
            brand=brand,
            model=vehicle_model,
            **{field: data[field] for field in VEHICLE_FIELDS if field in data},
        )
        try:
            vehicle.save()
        except IntegrityError:
            raise Conflict(f"A vehicle with plate '{data['plate']}' already exists.")

    logger.info(f"Vehicle {vehicle.pk} ({vehicle.plate}) created in store {vehicle.store_id} by caller {caller.user_id}")
    return _load_vehicle(vehicle.pk)


def update_vehicle(caller, vehicle_id, data):
    with transaction.atomic():
        vehicle = _load_vehicle(vehicle_id, for_update=True)
        authorize_nested_resource(caller, vehicle.store_id)

        if 'plate' in data and data['plate'] != vehicle.plate:
            _ensure_unique_plate(data['plate'], exclude_pk=vehicle.pk)

        new_store_id = data.get('store_id', vehicle.store_id)
        if new_store_id != vehicle.store_id:
            authorize_store_action(caller, new_store_id, require_exists=True)
            _lock_store(new_store_id)
            vehicle.store_id = new_store_id

        if 'category_id' in data and data['category_id'] != vehicle.category_id:
            _ensure_category(data['category_id'])
            vehicle.category_id = data['category_id']

        brand = _resolve_brand(data, current=vehicle.brand)
        vehicle.brand = brand
        vehicle.model = _resolve_model(data, brand, current=vehicle.model)

        for field in VEHICLE_FIELDS:
            if field in data:
                setattr(vehicle, field, data[field])
        try:
            vehicle.save()
        except IntegrityError:
            raise Conflict(f"A vehicle with plate '{vehicle.plate}' already exists.")

    logger.info(f"Vehicle {vehicle.pk} updated by caller {caller.user_id}")
    return _load_vehicle(vehicle.pk)


def update_vehicle_status(caller, vehicle_id, status):
    with transaction.atomic():
        vehicle = _load_vehicle(vehicle_id, for_update=True)
        authorize_nested_resource(caller, vehicle.store_id)
        vehicle.status = status
        vehicle.save(update_fields=['status', 'updated_at'])
    logger.info(f"Vehicle {vehicle.pk} status set to {status} by caller {caller.user_id}")
    return _load_vehicle(vehicle.pk)


def delete_vehicle(caller, vehicle_id):
    with transaction.atomic():
        vehicle = _load_vehicle(vehicle_id, for_update=True)
        authorize_nested_resource(caller, vehicle.store_id)
        vehicle.soft_delete()
    logger.info(f"Vehicle {vehicle.pk} soft-deleted by caller {caller.user_id}")
