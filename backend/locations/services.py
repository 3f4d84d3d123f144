"""
Store record service: hierarchy and uniqueness checks around every write.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import Prefetch

from backend.core.exceptions import Conflict, NotFound
from . import hierarchy
from .models import Store

logger = logging.getLogger('backend.locations')

STORE_FIELDS = ('name', 'cnpj', 'address', 'phone')


def _ensure_unique_cnpj(cnpj, exclude_pk=None):
    qs = Store.all_objects.filter(cnpj=cnpj)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict(f"A store with CNPJ '{cnpj}' already exists.")


def store_queryset():
    return Store.objects.select_related('parent').prefetch_related(
        Prefetch('branches', queryset=Store.objects.order_by('name'))
    )


def list_stores():
    return store_queryset().order_by('name')


def get_store(store_id):
    try:
        return store_queryset().get(pk=store_id)
    except Store.DoesNotExist:
        raise NotFound(f'Store {store_id} not found.')


def create_store(data):
    parent_id = data.get('parent_id')
    with transaction.atomic():
        _ensure_unique_cnpj(data['cnpj'])
        hierarchy.validate_create(parent_id)
        try:
            store = Store.objects.create(
                parent_id=parent_id,
                **{field: data[field] for field in STORE_FIELDS if field in data},
            )
        except IntegrityError:
            raise Conflict(f"A store with CNPJ '{data['cnpj']}' already exists.")
    logger.info(f"Store '{store.name}' ({store.pk}) created, parent={parent_id}")
    return store


def update_store(store, data):
    with transaction.atomic():
        store = Store.objects.select_for_update().get(pk=store.pk)

        if 'cnpj' in data and data['cnpj'] != store.cnpj:
            _ensure_unique_cnpj(data['cnpj'], exclude_pk=store.pk)

        if 'parent_id' in data and data['parent_id'] != store.parent_id:
            hierarchy.validate_reparent(store, data['parent_id'])
            store.parent_id = data['parent_id']

        for field in STORE_FIELDS:
            if field in data:
                setattr(store, field, data[field])
        try:
            store.save()
        except IntegrityError:
            raise Conflict(f"A store with CNPJ '{store.cnpj}' already exists.")
    logger.info(f"Store {store.pk} updated")
    return store


def delete_store(store):
    with transaction.atomic():
        store = Store.objects.select_for_update().get(pk=store.pk)
        if not hierarchy.deletable(store):
            vehicles, branches = hierarchy.blocking_counts(store)
            logger.warning(f"Store {store.pk} delete blocked: {vehicles} vehicles, {branches} branches")
            raise Conflict(
                f'Store cannot be deleted: it still has {vehicles} vehicle(s) and {branches} branch(es).'
            )
        store.soft_delete()
    logger.info(f"Store {store.pk} soft-deleted")
