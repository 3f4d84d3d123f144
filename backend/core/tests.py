"""
Tests for authentication, the current-user endpoint and user administration
"""
from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken
from backend.locations.scoping import Caller
from .test_utils import TestDataFactory, AuthenticatedAPIClient

User = get_user_model()


class AuthenticationTests(TestCase):
    """JWT login, refresh and me"""

    def setUp(self):
        self.store = TestDataFactory.create_store(name='Head')
        self.manager = TestDataFactory.create_manager(store=self.store, username='maria', name='Maria')
        self.client = AuthenticatedAPIClient()

    def test_login_returns_tokens_with_role_and_store(self):
        """Test login returns tokens with role and store"""
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'maria', 'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', response.data)
        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], 'manager')
        self.assertEqual(token['store_id'], self.store.pk)
        self.assertEqual(token['name'], 'Maria')
        self.assertEqual(response.data['user']['store_name'], 'Head')

    def test_login_with_wrong_password(self):
        """Test login with wrong password"""
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'maria', 'password': 'wrong',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        """Test token refresh"""
        response = self.client.post('/api/v1/auth/login/', {
            'username': 'maria', 'password': 'testpass123',
        }, format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': response.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me(self):
        """Test current user endpoint"""
        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_admin'])
        self.assertEqual(response.data['store']['id'], self.store.pk)

    def test_me_requires_token(self):
        """Test current user endpoint requires token"""
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_caller_from_user(self):
        """Test caller from user"""
        caller = Caller.from_user(self.manager)
        self.assertEqual((caller.role, caller.store_id), ('manager', self.store.pk))
        self.assertFalse(caller.is_admin)
        self.assertTrue(Caller.from_user(TestDataFactory.create_admin()).is_admin)

    def test_manager_of_deleted_store_has_no_store(self):
        """Test manager of deleted store has no store"""
        self.store.soft_delete()
        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/admin/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class UserAdministrationTests(TestCase):
    """Admin-only user endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin(username='root')
        self.store = TestDataFactory.create_store()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_manager(self):
        """Test create manager"""
        response = self.client.post('/api/v1/admin/users/', {
            'username': 'joao', 'email': 'joao@test.com', 'password': 'Str0ng-pass!',
            'role': 'manager', 'store_id': self.store.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('password', response.data)
        user = User.objects.get(username='joao')
        self.assertTrue(user.check_password('Str0ng-pass!'))
        self.assertEqual(user.store_id, self.store.pk)

    def test_manager_requires_store(self):
        """Test manager requires store"""
        response = self.client.post('/api/v1/admin/users/', {
            'username': 'joao', 'email': 'joao@test.com', 'password': 'Str0ng-pass!', 'role': 'manager',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_manager_store_must_exist(self):
        """Test manager store must exist"""
        response = self.client.post('/api/v1/admin/users/', {
            'username': 'joao', 'email': 'joao@test.com', 'password': 'Str0ng-pass!',
            'role': 'manager', 'store_id': 999999,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_cannot_have_store(self):
        """Test admin cannot have store"""
        response = self.client.post('/api/v1/admin/users/', {
            'username': 'boss', 'email': 'boss@test.com', 'password': 'Str0ng-pass!',
            'role': 'admin', 'store_id': self.store.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_username_conflicts(self):
        """Test duplicate username conflicts"""
        response = self.client.post('/api/v1/admin/users/', {
            'username': 'root', 'email': 'other@test.com', 'password': 'Str0ng-pass!', 'role': 'admin',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_password_required_on_create(self):
        """Test password required on create"""
        response = self.client.post('/api/v1/admin/users/', {
            'username': 'nopass', 'email': 'nopass@test.com', 'role': 'admin',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filter_by_role(self):
        """Test filter by role"""
        TestDataFactory.create_manager(store=self.store)
        response = self.client.get('/api/v1/admin/users/', {'role': 'manager'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({u['role'] for u in response.data}, {'manager'})

    def test_promote_manager_to_admin_requires_clearing_store(self):
        """Test promote manager to admin requires clearing store"""
        manager = TestDataFactory.create_manager(store=self.store)
        response = self.client.patch(f'/api/v1/admin/users/{manager.pk}/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(
            f'/api/v1/admin/users/{manager.pk}/', {'role': 'admin', 'store_id': None}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['store_id'])

    def test_cannot_delete_self(self):
        """Test cannot delete self"""
        response = self.client.delete(f'/api/v1/admin/users/{self.admin.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_user(self):
        """Test delete user"""
        manager = TestDataFactory.create_manager(store=self.store)
        response = self.client.delete(f'/api/v1/admin/users/{manager.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=manager.pk).exists())

    def test_manager_cannot_administer_users(self):
        """Test manager cannot administer users"""
        self.client.authenticate_user(TestDataFactory.create_manager(store=self.store))
        response = self.client.get('/api/v1/admin/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
