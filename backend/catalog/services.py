"""
Taxonomy record service (categories, brands, models).
"""
import logging

from django.db import IntegrityError, transaction

from backend.core.exceptions import Conflict, NotFound
from backend.inventory.models import Vehicle
from .models import Category, Brand, VehicleModel

logger = logging.getLogger('backend.catalog')


def _ensure_unique_name(model, name, exclude_pk=None, **scope):
    qs = model.objects.filter(name=name, **scope)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict(f"{model._meta.verbose_name.capitalize()} '{name}' already exists.")


def _ensure_unreferenced(instance, field):
    # soft-deleted vehicles still hold the foreign key
    count = Vehicle.all_objects.filter(**{field: instance}).count()
    if count:
        logger.warning(f"Delete of {instance._meta.model_name} {instance.pk} blocked by {count} vehicles")
        raise Conflict(f'Cannot delete: {count} vehicle(s) reference this {instance._meta.verbose_name}.')


def get_brand(brand_id):
    try:
        return Brand.objects.get(pk=brand_id)
    except Brand.DoesNotExist:
        raise NotFound(f'Brand {brand_id} not found.')


def save_category(data, instance=None):
    with transaction.atomic():
        if 'name' in data:
            _ensure_unique_name(Category, data['name'], exclude_pk=getattr(instance, 'pk', None))
        instance = instance or Category()
        for attr, value in data.items():
            setattr(instance, attr, value)
        try:
            instance.save()
        except IntegrityError:
            raise Conflict(f"Category '{instance.name}' already exists.")
    return instance


def delete_category(category):
    with transaction.atomic():
        _ensure_unreferenced(category, 'category')
        category.delete()


def save_brand(data, instance=None):
    with transaction.atomic():
        if 'name' in data:
            _ensure_unique_name(Brand, data['name'], exclude_pk=getattr(instance, 'pk', None))
        instance = instance or Brand()
        for attr, value in data.items():
            setattr(instance, attr, value)
        try:
            instance.save()
        except IntegrityError:
            raise Conflict(f"Brand '{instance.name}' already exists.")
    return instance


def delete_brand(brand):
    with transaction.atomic():
        _ensure_unreferenced(brand, 'brand')
        if brand.models.exists():
            raise Conflict('Cannot delete: the brand still has models.')
        brand.delete()


def save_model(data, instance=None):
    with transaction.atomic():
        brand_id = data.get('brand_id', getattr(instance, 'brand_id', None))
        get_brand(brand_id)
        name = data.get('name', getattr(instance, 'name', None))
        _ensure_unique_name(VehicleModel, name, exclude_pk=getattr(instance, 'pk', None), brand_id=brand_id)
        instance = instance or VehicleModel()
        for attr, value in data.items():
            setattr(instance, attr, value)
        try:
            instance.save()
        except IntegrityError:
            raise Conflict(f"Model '{name}' already exists for this brand.")
    return instance


def delete_model(vehicle_model):
    with transaction.atomic():
        _ensure_unreferenced(vehicle_model, 'model')
        vehicle_model.delete()


def resolve_brand(name, brand_fipe_id=None):
    """Idempotent get-or-create of a brand keyed on its name."""
    brand, created = Brand.objects.get_or_create(
        name=name, defaults={'brand_fipe_id': brand_fipe_id}
    )
    if created:
        logger.info(f"Brand '{name}' created on the fly")
    return brand


def resolve_model(brand, name, model_fipe_id=None):
    """Idempotent get-or-create of a model keyed on (brand, name)."""
    vehicle_model, created = VehicleModel.objects.get_or_create(
        brand=brand, name=name, defaults={'model_fipe_id': model_fipe_id}
    )
    if created:
        logger.info(f"Model '{name}' of brand '{brand.name}' created on the fly")
    return vehicle_model
