"""
Tests for the FIPE price table proxy
"""
from io import StringIO
from unittest import mock

import requests
from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .fipe import FipeClient


def fake_response(status_code=200, payload=None):
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@mock.patch('backend.pricing.fipe.requests.get')
class FipeProxyTests(TestCase):
    """Cached pass-through to the price table"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_brands_are_fetched_once_and_cached(self, mock_get):
        """Test brands are fetched once and cached"""
        mock_get.return_value = fake_response(payload=[{'codigo': '21', 'nome': 'FIAT'}])
        for _ in range(2):
            response = self.client.get('/api/v1/fipe/carros/marcas/')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data, [{'codigo': '21', 'nome': 'FIAT'}])
        self.assertEqual(mock_get.call_count, 1)
        self.assertTrue(mock_get.call_args[0][0].endswith('/carros/marcas'))

    def test_value_path(self, mock_get):
        """Test FIPE value lookup"""
        mock_get.return_value = fake_response(payload={'Valor': 'R$ 50.000,00'})
        response = self.client.get('/api/v1/fipe/motos/marcas/80/modelos/123/anos/2020-1/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(mock_get.call_args[0][0].endswith('/motos/marcas/80/modelos/123/anos/2020-1'))
        self.assertIsNotNone(cache.get('fipe:motos:80:123:2020-1'))

    def test_invalid_vehicle_type(self, mock_get):
        """Test invalid vehicle type"""
        response = self.client.get('/api/v1/fipe/barcos/marcas/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_get.assert_not_called()

    def test_upstream_status_is_forwarded_and_not_cached(self, mock_get):
        """Test upstream status is forwarded and not cached"""
        mock_get.return_value = fake_response(status_code=404)
        response = self.client.get('/api/v1/fipe/carros/marcas/999/modelos/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIsNone(cache.get('fipe:carros:999:modelos'))

        mock_get.return_value = fake_response(payload={'modelos': [], 'anos': []})
        response = self.client.get('/api/v1/fipe/carros/marcas/999/modelos/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_get.call_count, 2)

    def test_unreachable_upstream_is_bad_gateway(self, mock_get):
        """Test unreachable upstream is bad gateway"""
        mock_get.side_effect = requests.ConnectionError('down')
        response = self.client.get('/api/v1/fipe/carros/marcas/21/modelos/5940/anos/')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertIn('error', response.data)

    def test_requires_authentication(self, mock_get):
        """Test requires authentication"""
        self.client.logout()
        response = self.client.get('/api/v1/fipe/carros/marcas/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_client_uses_configured_timeout(self, mock_get):
        """Test client uses configured timeout"""
        mock_get.return_value = fake_response(payload=[])
        FipeClient(base_url='http://fipe.test/api/', timeout=3).get_brands('caminhoes')
        mock_get.assert_called_once_with('http://fipe.test/api/caminhoes/marcas', timeout=3)


class ClearFipeCacheCommandTests(TestCase):
    """clear_fipe_cache management command"""

    def test_reports_zero_without_redis(self):
        """Test reports zero without redis"""
        out = StringIO()
        call_command('clear_fipe_cache', '--type', 'carros', stdout=out)
        self.assertIn('Removed 0 cached FIPE entries matching "fipe:carros:"', out.getvalue())
