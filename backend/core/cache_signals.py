"""
Cache invalidation signals
Drop the cached public lookup lists when the underlying records change
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import (
    invalidate_cached_queries,
    CATEGORIES_LIST_PREFIX, BRANDS_LIST_PREFIX, STORES_LIST_PREFIX,
)

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Temporarily suspend cache invalidation signals.
    Useful for bulk loads; invalidate manually after the block.
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


def invalidate_lookup_lists():
    invalidate_cached_queries(CATEGORIES_LIST_PREFIX, BRANDS_LIST_PREFIX, STORES_LIST_PREFIX)


@receiver([post_save, post_delete], sender='catalog.Category')
def invalidate_categories_cache(sender, instance, **kwargs):
    if is_suspended():
        return
    invalidate_cached_queries(CATEGORIES_LIST_PREFIX)


@receiver([post_save, post_delete], sender='catalog.Brand')
def invalidate_brands_cache(sender, instance, **kwargs):
    if is_suspended():
        return
    invalidate_cached_queries(BRANDS_LIST_PREFIX)


@receiver([post_save, post_delete], sender='locations.Store')
def invalidate_stores_cache(sender, instance, **kwargs):
    if is_suspended():
        return
    # soft deletes arrive here as saves
    invalidate_cached_queries(STORES_LIST_PREFIX)
