"""
Tests for the vehicle taxonomy (categories, brands, models) and the seed command
"""
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.locations.models import Store
from .models import Category, Brand, VehicleModel
from . import services

User = get_user_model()


class CategoryAPITests(TestCase):
    """Category endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_category(self):
        """Test create category"""
        response = self.client.post('/api/v1/admin/vehicle-categories/', {'name': 'SUV', 'icon': '🚙'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['active'])

    def test_duplicate_name_conflicts(self):
        """Test duplicate name conflicts"""
        TestDataFactory.create_category(name='SUV')
        response = self.client.post('/api/v1/admin/vehicle-categories/', {'name': 'SUV'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_rename_to_own_name_is_allowed(self):
        """Test rename to own name is allowed"""
        category = TestDataFactory.create_category(name='SUV')
        response = self.client.put(
            f'/api/v1/admin/vehicle-categories/{category.pk}/', {'name': 'SUV', 'active': False}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['active'])

    def test_delete_unused_category(self):
        """Test delete unused category"""
        category = TestDataFactory.create_category()
        response = self.client.delete(f'/api/v1/admin/vehicle-categories/{category.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Category.objects.filter(pk=category.pk).exists())

    def test_delete_referenced_category_conflicts(self):
        """Test delete referenced category conflicts"""
        category = TestDataFactory.create_category()
        vehicle = TestDataFactory.create_vehicle(store=TestDataFactory.create_store(), category=category)
        vehicle.soft_delete()
        response = self.client.delete(f'/api/v1/admin/vehicle-categories/{category.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_missing_category_is_404(self):
        """Test missing category is 404"""
        response = self.client.get('/api/v1/admin/vehicle-categories/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_manager_may_manage_taxonomy(self):
        """Test manager may manage taxonomy"""
        manager = TestDataFactory.create_manager(store=TestDataFactory.create_store())
        self.client.authenticate_user(manager)
        response = self.client.post('/api/v1/admin/vehicle-categories/', {'name': 'Van'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)


class BrandAndModelAPITests(TestCase):
    """Brand and model endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.brand = TestDataFactory.create_brand(name='Honda', brand_fipe_id='25')

    def test_create_brand(self):
        """Test create brand"""
        response = self.client.post('/api/v1/admin/brands/', {'name': 'Kia', 'brand_fipe_id': '31'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_duplicate_brand_conflicts(self):
        """Test duplicate brand conflicts"""
        response = self.client.post('/api/v1/admin/brands/', {'name': 'Honda'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_brand_with_models_cannot_be_deleted(self):
        """Test brand with models cannot be deleted"""
        TestDataFactory.create_model(brand=self.brand)
        response = self.client.delete(f'/api/v1/admin/brands/{self.brand.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_create_model(self):
        """Test create model"""
        response = self.client.post('/api/v1/admin/models/', {
            'brand_id': self.brand.pk, 'name': 'Civic', 'model_fipe_id': '4400',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['brand_name'], 'Honda')

    def test_model_name_is_unique_per_brand(self):
        """Test model name is unique per brand"""
        TestDataFactory.create_model(brand=self.brand, name='Civic')
        response = self.client.post('/api/v1/admin/models/', {'brand_id': self.brand.pk, 'name': 'Civic'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        other_brand = TestDataFactory.create_brand()
        response = self.client.post('/api/v1/admin/models/', {'brand_id': other_brand.pk, 'name': 'Civic'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_model_of_missing_brand_is_not_found(self):
        """Test model of missing brand is not found"""
        response = self.client.post('/api/v1/admin/models/', {'brand_id': 999999, 'name': 'Ghost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_models_of_brand(self):
        """Test list models of brand"""
        TestDataFactory.create_model(brand=self.brand, name='Civic')
        TestDataFactory.create_model(name='Onix')
        response = self.client.get('/api/v1/admin/models/', {'brand_id': self.brand.pk})
        self.assertEqual([m['name'] for m in response.data], ['Civic'])
        response = self.client.get('/api/v1/admin/models/', {'brand_id': 'x'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_referenced_model_conflicts(self):
        """Test delete referenced model conflicts"""
        model = TestDataFactory.create_model(brand=self.brand)
        TestDataFactory.create_vehicle(store=TestDataFactory.create_store(), model=model)
        response = self.client.delete(f'/api/v1/admin/models/{model.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_resolve_is_idempotent(self):
        """Test resolve is idempotent"""
        brand = services.resolve_brand('Honda')
        self.assertEqual(brand.pk, self.brand.pk)
        first = services.resolve_model(brand, 'Fit', '4500')
        second = services.resolve_model(brand, 'Fit')
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(second.model_fipe_id, '4500')


class SeedCatalogCommandTests(TestCase):
    """seed_catalog management command"""

    def test_seed_is_idempotent(self):
        """Test seed is idempotent"""
        call_command('seed_catalog', stdout=StringIO())
        counts = (Category.objects.count(), Brand.objects.count(), VehicleModel.objects.count(),
                  Store.objects.count(), User.objects.count())
        call_command('seed_catalog', stdout=StringIO())
        self.assertEqual(counts, (Category.objects.count(), Brand.objects.count(), VehicleModel.objects.count(),
                                  Store.objects.count(), User.objects.count()))

    def test_seed_builds_hierarchy_and_users(self):
        """Test seed builds hierarchy and users"""
        call_command('seed_catalog', stdout=StringIO())
        branch = Store.objects.get(name='Filial Campinas')
        self.assertIsNotNone(branch.parent)
        self.assertIsNone(branch.parent.parent_id)
        manager = User.objects.get(username='manager')
        self.assertEqual(manager.store_id, branch.parent_id)
        admin = User.objects.get(username='admin')
        self.assertTrue(admin.check_password('admin123'))
        self.assertIsNone(admin.store_id)

    def test_skip_users(self):
        """Test seeding without users"""
        call_command('seed_catalog', '--skip-users', stdout=StringIO())
        self.assertEqual(User.objects.count(), 0)
        self.assertTrue(Brand.objects.filter(name='TOYOTA').exists())
