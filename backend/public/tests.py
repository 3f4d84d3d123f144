"""
Tests for the unauthenticated storefront endpoints
"""
import shutil
import tempfile
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient
from backend.core.test_utils import TestDataFactory

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class PublicVehicleTests(TestCase):
    """Storefront search and detail"""

    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.store = TestDataFactory.create_store(name='Matriz')
        self.branch = TestDataFactory.create_store(name='Filial', parent=self.store)
        self.available = TestDataFactory.create_vehicle(store=self.store, price=Decimal('70000'))
        self.branch_available = TestDataFactory.create_vehicle(store=self.branch, price=Decimal('40000'))
        self.sold = TestDataFactory.create_vehicle(store=self.store, status='Sold')
        self.reserved = TestDataFactory.create_vehicle(store=self.branch, status='Reserved')

    def test_search_only_returns_available_vehicles(self):
        """Test search only returns available vehicles"""
        response = self.client.get('/api/v1/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = {v['id'] for v in response.data['data']}
        self.assertEqual(ids, {self.available.pk, self.branch_available.pk})

    def test_status_parameter_cannot_reveal_other_statuses(self):
        """Test status parameter cannot reveal other statuses"""
        response = self.client.get('/api/v1/vehicles/', {'status': 'Sold'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 2)

    def test_search_filters_and_sort(self):
        """Test search filters and sort"""
        response = self.client.get('/api/v1/vehicles/', {'sort': 'price', 'order': 'asc'})
        self.assertEqual([v['id'] for v in response.data['data']], [self.branch_available.pk, self.available.pk])
        response = self.client.get('/api/v1/vehicles/', {'store_id': self.branch.pk})
        self.assertEqual([v['id'] for v in response.data['data']], [self.branch_available.pk])

    def test_invalid_search_parameters(self):
        """Test invalid search parameters"""
        response = self.client.get('/api/v1/vehicles/', {'page_size': 500})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cover_photo_url(self):
        """Test cover photo URL"""
        TestDataFactory.create_photo(self.available, display_order=1)
        cover = TestDataFactory.create_photo(self.available, is_cover=True, display_order=3)
        response = self.client.get('/api/v1/vehicles/')
        rows = {v['id']: v for v in response.data['data']}
        self.assertEqual(rows[self.available.pk]['cover_photo_url'], cover.url)
        self.assertIsNone(rows[self.branch_available.pk]['cover_photo_url'])

    def test_cover_photo_falls_back_to_first_photo(self):
        """Test cover photo falls back to first photo"""
        later = TestDataFactory.create_photo(self.available, display_order=4)
        first = TestDataFactory.create_photo(self.available, display_order=1)
        response = self.client.get('/api/v1/vehicles/')
        row = next(v for v in response.data['data'] if v['id'] == self.available.pk)
        self.assertEqual(row['cover_photo_url'], first.url)
        self.assertNotEqual(row['cover_photo_url'], later.url)

    def test_detail_of_available_vehicle(self):
        """Test detail of available vehicle"""
        TestDataFactory.create_photo(self.available, is_cover=True)
        response = self.client.get(f'/api/v1/vehicles/{self.available.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['store']['name'], 'Matriz')
        self.assertEqual(len(response.data['photos']), 1)

    def test_detail_of_unavailable_vehicle_is_404(self):
        """Test detail of unavailable vehicle is 404"""
        for vehicle in (self.sold, self.reserved):
            response = self.client.get(f'/api/v1/vehicles/{vehicle.pk}/')
            self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_detail_of_deleted_vehicle_is_404(self):
        """Test detail of deleted vehicle is 404"""
        self.available.soft_delete()
        response = self.client.get(f'/api/v1/vehicles/{self.available.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_models_with_available_vehicles(self):
        """Test models with available vehicles"""
        response = self.client.get('/api/v1/models/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = {row['model_name'] for row in response.data}
        self.assertEqual(names, {self.available.model.name, self.branch_available.model.name})


class PublicLookupTests(TestCase):
    """Cached category, brand and store lists"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def test_only_active_categories(self):
        """Test only active categories"""
        TestDataFactory.create_category(name='SUV')
        TestDataFactory.create_category(name='Old', active=False)
        response = self.client.get('/api/v1/vehicle-categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['SUV'])

    def test_category_list_is_refreshed_after_changes(self):
        """Test category list is refreshed after changes"""
        TestDataFactory.create_category(name='SUV')
        self.assertEqual(len(self.client.get('/api/v1/vehicle-categories/').data), 1)
        TestDataFactory.create_category(name='Van')
        self.assertEqual(len(self.client.get('/api/v1/vehicle-categories/').data), 2)

    def test_brand_list_is_refreshed_after_delete(self):
        """Test brand list is refreshed after delete"""
        brand = TestDataFactory.create_brand(name='Kia')
        TestDataFactory.create_brand(name='Audi')
        self.assertEqual([b['name'] for b in self.client.get('/api/v1/brands/').data], ['Audi', 'Kia'])
        brand.delete()
        self.assertEqual([b['name'] for b in self.client.get('/api/v1/brands/').data], ['Audi'])

    def test_store_list_hides_deleted_stores(self):
        """Test store list hides deleted stores"""
        head = TestDataFactory.create_store(name='Head')
        branch = TestDataFactory.create_store(name='Branch', parent=head)
        response = self.client.get('/api/v1/stores/')
        self.assertEqual({s['name'] for s in response.data}, {'Head', 'Branch'})
        branch_row = next(s for s in response.data if s['name'] == 'Branch')
        self.assertEqual(branch_row['parent']['id'], head.pk)

        branch.soft_delete()
        response = self.client.get('/api/v1/stores/')
        self.assertEqual([s['name'] for s in response.data], ['Head'])

    def test_public_endpoints_ignore_bad_tokens(self):
        """Test public endpoints ignore bad tokens"""
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = self.client.get('/api/v1/brands/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
