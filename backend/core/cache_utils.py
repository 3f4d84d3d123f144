"""
Caching utilities for lookup lists and upstream lookups
Uses Redis (django-redis) in production, the local memory cache otherwise
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
LOOKUP_LIST_CACHE_TTL = 600  # 10 minutes

# Prefixes of the public lookup lists
CATEGORIES_LIST_PREFIX = "public_categories"
BRANDS_LIST_PREFIX = "public_brands"
STORES_LIST_PREFIX = "public_stores"


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=600, key_prefix=BRANDS_LIST_PREFIX)
        def get_brand_rows():
            return list(...)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def invalidate_cached_queries(*prefixes):
    """Drop the argument-less entries written by ``cached_query`` for each prefix"""
    keys = [make_cache_key(prefix) for prefix in prefixes]
    cache.delete_many(keys)
    logger.debug(f"Invalidated cached queries: {', '.join(prefixes)}")


def redis_cache_enabled():
    return cache.__class__.__module__.startswith('django_redis')


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern
    Uses Redis SCAN; other cache backends have no key listing and are left untouched.
    Returns the number of deleted keys.
    """
    if not redis_cache_enabled():
        logger.info(f"Cache backend does not support pattern invalidation, skipped: {pattern}")
        return 0

    from django_redis import get_redis_connection
    redis_conn = get_redis_connection("default")

    keys = []
    cursor = 0
    while True:
        cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
        keys.extend(partial_keys)
        if cursor == 0:
            break

    if keys:
        redis_conn.delete(*keys)
    logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    return len(keys)
