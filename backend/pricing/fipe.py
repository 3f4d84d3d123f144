"""
Client for the public FIPE price table (parallelum.com.br).

Successful responses are cached for ``FIPE_CACHE_TTL`` seconds under
``fipe:<tipo>:...`` keys; failures are never cached.
"""
import logging
from typing import Any, Optional

import requests
from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.exceptions import APIException

from backend.core.exceptions import InvalidInput

logger = logging.getLogger(__name__)

VEHICLE_TYPES = ('carros', 'motos', 'caminhoes')
CACHE_KEY_PREFIX = 'fipe'


class FipeUpstreamError(APIException):
    """The price table answered with an error or could not be reached."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Error fetching data from the FIPE price table.'
    default_code = 'fipe_upstream_error'

    def __init__(self, detail=None, upstream_status: Optional[int] = None):
        super().__init__(detail)
        if upstream_status is not None:
            self.status_code = upstream_status


class FipeClient:
    """Cached read-only access to the FIPE brand/model/year/value endpoints."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 cache_ttl: Optional[int] = None):
        self.base_url = (base_url or settings.FIPE_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.FIPE_TIMEOUT
        self.cache_ttl = cache_ttl if cache_ttl is not None else settings.FIPE_CACHE_TTL

    @staticmethod
    def validate_type(tipo: str) -> str:
        if tipo not in VEHICLE_TYPES:
            raise InvalidInput(f"Vehicle type must be one of: {', '.join(VEHICLE_TYPES)}.")
        return tipo

    def get_cache_key(self, tipo: str, *parts: str) -> str:
        return ':'.join((CACHE_KEY_PREFIX, tipo) + tuple(str(p) for p in parts))

    def _fetch(self, cache_key: str, path: str) -> Any:
        cached = cache.get(cache_key)
        if cached is not None:
            logger.debug(f"FIPE cache HIT: {cache_key}")
            return cached

        url = f'{self.base_url}/{path}'
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"FIPE request to {url} failed: {e}", exc_info=True)
            raise FipeUpstreamError()

        if response.status_code != 200:
            logger.warning(f"FIPE request to {url} returned {response.status_code}")
            raise FipeUpstreamError(upstream_status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.error(f"FIPE response from {url} is not JSON", exc_info=True)
            raise FipeUpstreamError()

        cache.set(cache_key, data, self.cache_ttl)
        logger.debug(f"FIPE cache MISS, stored: {cache_key}")
        return data

    def get_brands(self, tipo: str):
        self.validate_type(tipo)
        return self._fetch(self.get_cache_key(tipo, 'marcas'), f'{tipo}/marcas')

    def get_models(self, tipo: str, marca: str):
        self.validate_type(tipo)
        return self._fetch(
            self.get_cache_key(tipo, marca, 'modelos'),
            f'{tipo}/marcas/{marca}/modelos',
        )

    def get_years(self, tipo: str, marca: str, modelo: str):
        self.validate_type(tipo)
        return self._fetch(
            self.get_cache_key(tipo, marca, modelo, 'anos'),
            f'{tipo}/marcas/{marca}/modelos/{modelo}/anos',
        )

    def get_value(self, tipo: str, marca: str, modelo: str, ano: str):
        self.validate_type(tipo)
        return self._fetch(
            self.get_cache_key(tipo, marca, modelo, ano),
            f'{tipo}/marcas/{marca}/modelos/{modelo}/anos/{ano}',
        )
