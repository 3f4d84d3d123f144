"""
Tests for the store hierarchy, store scope resolution and store administration
"""
from unittest import mock

from django.test import TestCase
from rest_framework import status
from backend.core.exceptions import Forbidden, NotFound
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.inventory.models import Vehicle
from .hierarchy import (
    HasBranches, ParentIsBranch, ParentNotFound, SelfParent,
    validate_create, validate_reparent, hierarchy_ids, deletable,
)
from .models import Store
from .scoping import Caller, authorize_store_action, authorize_nested_resource, listing_scope


class StoreHierarchyTests(TestCase):
    """Two-level head/branch invariants"""

    def setUp(self):
        self.head = TestDataFactory.create_store(name='Head')
        self.branch = TestDataFactory.create_store(name='Branch', parent=self.head)
        self.other_head = TestDataFactory.create_store(name='Other head')

    def test_create_without_parent_is_allowed(self):
        """Test create without parent is allowed"""
        validate_create(None)

    def test_create_under_head_is_allowed(self):
        """Test create under head is allowed"""
        validate_create(self.head.pk)

    def test_create_under_branch_fails(self):
        """Test create under branch fails"""
        with self.assertRaises(ParentIsBranch):
            validate_create(self.branch.pk)

    def test_create_under_missing_parent_fails(self):
        """Test create under missing parent fails"""
        with self.assertRaises(ParentNotFound):
            validate_create(999999)

    def test_reparent_store_with_branches_fails(self):
        """Test reparent store with branches fails"""
        with self.assertRaises(HasBranches):
            validate_reparent(self.head, self.other_head.pk)

    def test_reparent_under_branch_fails(self):
        """Test reparent under branch fails"""
        with self.assertRaises(ParentIsBranch):
            validate_reparent(self.other_head, self.branch.pk)

    def test_reparent_to_itself_fails(self):
        """Test reparent to itself fails"""
        with self.assertRaises(SelfParent):
            validate_reparent(self.other_head, self.other_head.pk)

    def test_clearing_parent_is_always_allowed(self):
        """Test clearing parent is always allowed"""
        validate_reparent(self.branch, None)
        validate_reparent(self.head, None)

    def test_hierarchy_ids(self):
        """Test hierarchy IDs of head and branch"""
        self.assertEqual(hierarchy_ids(self.branch), {self.branch.pk, self.head.pk})
        self.assertEqual(hierarchy_ids(self.head), {self.head.pk})

    def test_deletable(self):
        """Test deletable store checks"""
        self.assertFalse(deletable(self.head))
        self.assertTrue(deletable(self.other_head))
        TestDataFactory.create_vehicle(store=self.other_head)
        self.assertFalse(deletable(self.other_head))

    def test_soft_deleted_branch_does_not_block(self):
        """Test soft-deleted branch does not block"""
        self.branch.soft_delete()
        self.assertTrue(deletable(self.head))

    def test_is_branch(self):
        """Test branch flag follows the parent link"""
        self.assertTrue(self.branch.is_branch)
        self.assertFalse(self.head.is_branch)
        self.assertFalse(self.other_head.is_branch)

    def test_parent_row_is_locked_by_checks(self):
        """Test create and reparent checks lock the parent store"""
        with mock.patch.object(Store.objects, 'select_for_update', wraps=Store.objects.select_for_update) as locked:
            validate_create(self.head.pk)
            validate_reparent(self.other_head, self.head.pk)
        self.assertEqual(locked.call_count, 2)


class ScopeResolverTests(TestCase):
    """Point authorization and listing scope per role"""

    def setUp(self):
        self.head = TestDataFactory.create_store(name='Head')
        self.branch_1 = TestDataFactory.create_store(name='Branch 1', parent=self.head)
        self.branch_2 = TestDataFactory.create_store(name='Branch 2', parent=self.head)
        self.other_head = TestDataFactory.create_store(name='Other head')
        self.admin = Caller(role='admin')
        self.head_manager = Caller(role='manager', store_id=self.head.pk)
        self.branch_manager = Caller(role='manager', store_id=self.branch_1.pk)

    def test_admin_is_unrestricted(self):
        """Test admin is unrestricted"""
        scope = listing_scope(self.admin)
        self.assertTrue(scope.unrestricted)
        authorize_store_action(self.admin, self.other_head.pk)
        authorize_store_action(self.admin, 999999)

    def test_head_manager_lists_own_store_and_branches(self):
        """Test head manager lists own store and branches"""
        scope = listing_scope(self.head_manager)
        self.assertEqual(scope.store_ids, {self.head.pk, self.branch_1.pk, self.branch_2.pk})

    def test_branch_manager_lists_own_store_and_head(self):
        """Test branch manager lists own store and head"""
        scope = listing_scope(self.branch_manager)
        self.assertEqual(scope.store_ids, {self.branch_1.pk, self.head.pk})

    def test_branch_manager_may_act_on_own_store_and_head(self):
        """Test branch manager may act on own store and head"""
        authorize_store_action(self.branch_manager, self.branch_1.pk)
        authorize_store_action(self.branch_manager, self.head.pk)

    def test_branch_manager_may_not_act_on_sibling_branch(self):
        """Test branch manager may not act on sibling branch"""
        with self.assertRaises(Forbidden):
            authorize_store_action(self.branch_manager, self.branch_2.pk)

    def test_head_manager_point_authorization_excludes_branches(self):
        """Test head manager point authorization excludes branches"""
        with self.assertRaises(Forbidden):
            authorize_nested_resource(self.head_manager, self.branch_1.pk)

    def test_manager_may_not_act_on_unrelated_store(self):
        """Test manager may not act on unrelated store"""
        with self.assertRaises(Forbidden):
            authorize_store_action(self.head_manager, self.other_head.pk)

    def test_missing_target_is_not_found_when_existence_required(self):
        """Test missing target is not found when existence required"""
        with self.assertRaises(NotFound):
            authorize_store_action(self.head_manager, 999999, require_exists=True)
        with self.assertRaises(Forbidden):
            authorize_store_action(self.head_manager, 999999)

    def test_manager_without_store_is_always_forbidden(self):
        """Test manager without store is always forbidden"""
        storeless = Caller(role='manager', store_id=None)
        with self.assertRaises(Forbidden):
            listing_scope(storeless)
        with self.assertRaises(Forbidden):
            authorize_store_action(storeless, self.head.pk)
        with self.assertRaises(Forbidden):
            authorize_store_action(storeless, 999999, require_exists=True)

    def test_scope_formula_with_parent_and_branches(self):
        """Test scope formula with parent and branches"""
        # rows written directly; the service layer would refuse this shape
        parent = Store.objects.create(name='P', cnpj='00.000.000/0001-01')
        store_a = Store.objects.create(name='A', cnpj='00.000.000/0001-02', parent=parent)
        b1 = Store.objects.create(name='B1', cnpj='00.000.000/0001-03', parent=store_a)
        b2 = Store.objects.create(name='B2', cnpj='00.000.000/0001-04', parent=store_a)
        sibling_of_parent = Store.objects.create(name='Q', cnpj='00.000.000/0001-05')
        manager = Caller(role='manager', store_id=store_a.pk)

        self.assertEqual(listing_scope(manager).store_ids, {store_a.pk, parent.pk, b1.pk, b2.pk})
        authorize_store_action(manager, parent.pk)
        authorize_store_action(manager, store_a.pk)
        with self.assertRaises(Forbidden):
            authorize_store_action(manager, sibling_of_parent.pk)

    def test_listing_scope_apply(self):
        """Test listing scope apply"""
        TestDataFactory.create_vehicle(store=self.head)
        TestDataFactory.create_vehicle(store=self.other_head)
        scoped = listing_scope(self.head_manager).apply(Vehicle.objects.all())
        self.assertEqual(list(scoped.values_list('store_id', flat=True)), [self.head.pk])


class StoreAPITests(TestCase):
    """Admin store endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.head = TestDataFactory.create_store(name='Head', cnpj='11.111.111/0001-11')
        self.branch = TestDataFactory.create_store(name='Branch', parent=self.head)

    def test_list_stores_includes_branches(self):
        """Test list stores includes branches"""
        response = self.client.get('/api/v1/admin/stores/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        head = next(s for s in response.data if s['id'] == self.head.pk)
        self.assertEqual([b['id'] for b in head['branches']], [self.branch.pk])

    def test_create_branch(self):
        """Test create branch"""
        response = self.client.post('/api/v1/admin/stores/', {
            'name': 'New branch', 'cnpj': '22.222.222/0001-22', 'parent_id': self.head.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['parent']['id'], self.head.pk)

    def test_create_branch_of_branch_conflicts(self):
        """Test create branch of branch conflicts"""
        response = self.client.post('/api/v1/admin/stores/', {
            'name': 'Nested', 'cnpj': '33.333.333/0001-33', 'parent_id': self.branch.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'parent_is_branch')

    def test_create_with_missing_parent_is_not_found(self):
        """Test create with missing parent is not found"""
        response = self.client.post('/api/v1/admin/stores/', {
            'name': 'Orphan', 'cnpj': '44.444.444/0001-44', 'parent_id': 999999,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_duplicate_cnpj_conflicts(self):
        """Test duplicate CNPJ conflicts"""
        response = self.client.post('/api/v1/admin/stores/', {
            'name': 'Copy', 'cnpj': '11.111.111/0001-11',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_reparent_head_with_branches_conflicts(self):
        """Test reparent head with branches conflicts"""
        other = TestDataFactory.create_store()
        response = self.client.patch(f'/api/v1/admin/stores/{self.head.pk}/', {'parent_id': other.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'has_branches')

    def test_hierarchy_stays_within_two_levels(self):
        """Test hierarchy stays within two levels"""
        other = TestDataFactory.create_store()
        self.client.patch(f'/api/v1/admin/stores/{self.head.pk}/', {'parent_id': other.pk}, format='json')
        self.client.post('/api/v1/admin/stores/', {
            'name': 'Nested', 'cnpj': '55.555.555/0001-55', 'parent_id': self.branch.pk,
        }, format='json')
        self.client.patch(f'/api/v1/admin/stores/{other.pk}/', {'parent_id': self.branch.pk}, format='json')
        for store in Store.objects.select_related('parent'):
            if store.parent is not None:
                self.assertIsNone(store.parent.parent_id)

    def test_delete_blocked_by_branches(self):
        """Test delete blocked by branches"""
        response = self.client.delete(f'/api/v1/admin/stores/{self.head.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_delete_blocked_by_vehicles(self):
        """Test delete blocked by vehicles"""
        TestDataFactory.create_vehicle(store=self.branch)
        response = self.client.delete(f'/api/v1/admin/stores/{self.branch.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('1 vehicle', response.data['error'])

    def test_create_branch_locks_parent(self):
        """Test create branch locks parent"""
        with mock.patch.object(Store.objects, 'select_for_update', wraps=Store.objects.select_for_update) as locked:
            response = self.client.post('/api/v1/admin/stores/', {
                'name': 'Locked branch', 'cnpj': '66.666.666/0001-66', 'parent_id': self.head.pk,
            }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        locked.assert_called()

    def test_reparent_locks_store_and_new_parent(self):
        """Test reparent locks store and new parent"""
        other = TestDataFactory.create_store()
        with mock.patch.object(Store.objects, 'select_for_update', wraps=Store.objects.select_for_update) as locked:
            response = self.client.patch(
                f'/api/v1/admin/stores/{other.pk}/', {'parent_id': self.head.pk}, format='json'
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(locked.call_count, 2)

    def test_delete_is_gated_by_deletable(self):
        """Test delete is gated by deletable"""
        with mock.patch('backend.locations.hierarchy.deletable', return_value=False) as check:
            response = self.client.delete(f'/api/v1/admin/stores/{self.branch.pk}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        check.assert_called_once()
        self.assertEqual(check.call_args[0][0].pk, self.branch.pk)
        self.assertTrue(Store.objects.filter(pk=self.branch.pk).exists())

    def test_delete_is_soft(self):
        """Test delete is soft"""
        response = self.client.delete(f'/api/v1/admin/stores/{self.branch.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Store.objects.filter(pk=self.branch.pk).exists())
        self.assertIsNotNone(Store.all_objects.get(pk=self.branch.pk).deleted_at)
        response = self.client.get(f'/api/v1/admin/stores/{self.branch.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_manager_cannot_manage_stores(self):
        """Test manager cannot manage stores"""
        manager = TestDataFactory.create_manager(store=self.head)
        self.client.authenticate_user(manager)
        response = self.client.get('/api/v1/admin/stores/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
