"""
Tests for vehicle records, vehicle search and vehicle photos
"""
import os
import shutil
import tempfile
from decimal import Decimal
from unittest import mock

from django.db import IntegrityError
from django.test import TestCase, override_settings
from rest_framework import status
from backend.catalog.models import Brand, VehicleModel
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.locations.models import Store
from backend.locations.scoping import Caller
from . import photos
from .models import Vehicle, VehiclePhoto

MEDIA_ROOT = tempfile.mkdtemp()


class VehicleSearchTests(TestCase):
    """Listing filters, sorting and pagination"""

    def setUp(self):
        self.store = TestDataFactory.create_store()
        self.category = TestDataFactory.create_category(name='Sedan')
        self.brand = TestDataFactory.create_brand(name='Toyota', brand_fipe_id='56')
        self.model = TestDataFactory.create_model(brand=self.brand, name='Corolla', model_fipe_id='2301')
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def _vehicle(self, **kwargs):
        kwargs.setdefault('store', self.store)
        kwargs.setdefault('category', self.category)
        kwargs.setdefault('model', self.model)
        return TestDataFactory.create_vehicle(**kwargs)

    def test_default_pagination(self):
        """Test default pagination"""
        for _ in range(45):
            self._vehicle()
        response = self.client.get('/api/v1/admin/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 20)
        self.assertEqual(response.data['pagination'], {
            'page': 1, 'page_size': 20, 'total': 45, 'total_pages': 3,
        })

    def test_last_page_and_past_the_end(self):
        """Test last page and past the end"""
        for _ in range(45):
            self._vehicle()
        response = self.client.get('/api/v1/admin/vehicles/', {'page': 3})
        self.assertEqual(len(response.data['data']), 5)
        response = self.client.get('/api/v1/admin/vehicles/', {'page': 4})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], [])
        self.assertEqual(response.data['pagination']['total'], 45)

    def test_price_range_sorted_ascending(self):
        """Test price range sorted ascending"""
        for price in ('30000', '120000', '90000', '60000'):
            self._vehicle(price=Decimal(price))
        response = self.client.get('/api/v1/admin/vehicles/', {
            'min_price': '50000', 'max_price': '100000', 'sort': 'price', 'order': 'asc',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        prices = [Decimal(v['price']) for v in response.data['data']]
        self.assertEqual(prices, [Decimal('60000'), Decimal('90000')])

    def test_range_bounds_are_inclusive(self):
        """Test range bounds are inclusive"""
        self._vehicle(model_year=2018)
        self._vehicle(model_year=2020)
        self._vehicle(model_year=2022)
        response = self.client.get('/api/v1/admin/vehicles/', {'year_min': 2018, 'year_max': 2020})
        self.assertEqual(response.data['pagination']['total'], 2)

    def test_filters_are_conjunctive(self):
        """Test filters are conjunctive"""
        self._vehicle(status='Sold', price=Decimal('10000'))
        self._vehicle(status='Sold', price=Decimal('90000'))
        self._vehicle(status='Available', price=Decimal('90000'))
        response = self.client.get('/api/v1/admin/vehicles/', {'status': 'Sold', 'min_price': '50000'})
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_search_text_matches_brand_model_and_plate(self):
        """Test search text matches brand model and plate"""
        self._vehicle(plate='XYZ9A88')
        other_model = TestDataFactory.create_model(name='Civic')
        self._vehicle(model=other_model)
        self.assertEqual(
            self.client.get('/api/v1/admin/vehicles/', {'search': 'corol'}).data['pagination']['total'], 1)
        self.assertEqual(
            self.client.get('/api/v1/admin/vehicles/', {'search': 'xyz9'}).data['pagination']['total'], 1)
        self.assertEqual(
            self.client.get('/api/v1/admin/vehicles/', {'search': '   '}).data['pagination']['total'], 2)

    def test_fipe_id_filters(self):
        """Test FIPE id filters"""
        self._vehicle()
        self._vehicle(model=TestDataFactory.create_model())
        response = self.client.get('/api/v1/admin/vehicles/', {'brand_fipe_id': '56', 'model_fipe_id': '2301'})
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_highlight_flag_filters_only_when_true(self):
        """Test highlight flag filters only when true"""
        self._vehicle(home_highlight=True)
        self._vehicle()
        response = self.client.get('/api/v1/admin/vehicles/', {'home_highlight': 'true'})
        self.assertEqual(response.data['pagination']['total'], 1)
        response = self.client.get('/api/v1/admin/vehicles/', {'home_highlight': 'false'})
        self.assertEqual(response.data['pagination']['total'], 2)

    def test_soft_deleted_vehicles_are_hidden(self):
        """Test soft-deleted vehicles are hidden"""
        vehicle = self._vehicle()
        self._vehicle()
        vehicle.soft_delete()
        response = self.client.get('/api/v1/admin/vehicles/')
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_invalid_parameters(self):
        """Test invalid parameters"""
        for params in ({'page': 0}, {'page_size': 101}, {'sort': 'plate'}, {'order': 'up'},
                       {'min_price': 'cheap'}, {'status': 'Stolen'}):
            response = self.client.get('/api/v1/admin/vehicles/', params)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, params)
            self.assertEqual(response.data['code'], 'invalid_input')

    def test_requires_authentication(self):
        """Test requires authentication"""
        self.client.logout()
        response = self.client.get('/api/v1/admin/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class VehicleScopeTests(TestCase):
    """Manager visibility and store authorization on vehicles"""

    def setUp(self):
        self.head = TestDataFactory.create_store(name='Head')
        self.branch = TestDataFactory.create_store(name='Branch', parent=self.head)
        self.sibling = TestDataFactory.create_store(name='Sibling', parent=self.head)
        self.other = TestDataFactory.create_store(name='Other')
        self.head_vehicle = TestDataFactory.create_vehicle(store=self.head)
        self.branch_vehicle = TestDataFactory.create_vehicle(store=self.branch)
        self.sibling_vehicle = TestDataFactory.create_vehicle(store=self.sibling)
        self.other_vehicle = TestDataFactory.create_vehicle(store=self.other)
        self.category = TestDataFactory.create_category()
        self.client = AuthenticatedAPIClient()

    def _ids(self, response):
        return {v['id'] for v in response.data['data']}

    def test_head_manager_lists_head_and_branches(self):
        """Test head manager lists head and branches"""
        self.client.authenticate_user(TestDataFactory.create_manager(store=self.head))
        response = self.client.get('/api/v1/admin/vehicles/')
        self.assertEqual(self._ids(response), {
            self.head_vehicle.pk, self.branch_vehicle.pk, self.sibling_vehicle.pk,
        })

    def test_branch_manager_lists_branch_and_head(self):
        """Test branch manager lists branch and head"""
        self.client.authenticate_user(TestDataFactory.create_manager(store=self.branch))
        response = self.client.get('/api/v1/admin/vehicles/')
        self.assertEqual(self._ids(response), {self.head_vehicle.pk, self.branch_vehicle.pk})

    def test_store_filter_cannot_widen_scope(self):
        """Test store filter cannot widen scope"""
        self.client.authenticate_user(TestDataFactory.create_manager(store=self.branch))
        response = self.client.get('/api/v1/admin/vehicles/', {'store_id': self.other.pk})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], [])

    def test_admin_lists_everything(self):
        """Test admin lists everything"""
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.get('/api/v1/admin/vehicles/')
        self.assertEqual(response.data['pagination']['total'], 4)

    def test_manager_without_store_is_forbidden(self):
        """Test manager without store is forbidden"""
        manager = TestDataFactory.create_manager(store=None)
        self.client.authenticate_user(manager)
        response = self.client.get('/api/v1/admin/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_vehicle_is_not_found_before_scope_check(self):
        """Test missing vehicle is not found before scope check"""
        self.client.authenticate_user(TestDataFactory.create_manager(store=self.branch))
        response = self.client.get('/api/v1/admin/vehicles/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_vehicle_outside_hierarchy_is_forbidden(self):
        """Test vehicle outside hierarchy is forbidden"""
        self.client.authenticate_user(TestDataFactory.create_manager(store=self.branch))
        response = self.client.get(f'/api/v1/admin/vehicles/{self.sibling_vehicle.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get(f'/api/v1/admin/vehicles/{self.head_vehicle.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_manager_cannot_create_in_foreign_store(self):
        """Test manager cannot create in foreign store"""
        self.client.authenticate_user(TestDataFactory.create_manager(store=self.branch))
        response = self.client.post('/api/v1/admin/vehicles/', {
            'store_id': self.other.pk, 'category_id': self.category.pk,
            'brand_name': 'Fiat', 'model_name': 'Uno', 'plate': 'FOR1234',
            'manufacture_year': 2020, 'model_year': 2020, 'price': '30000.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Vehicle.all_objects.filter(plate='FOR1234').exists())

    def test_manager_cannot_move_vehicle_to_foreign_store(self):
        """Test manager cannot move vehicle to foreign store"""
        self.client.authenticate_user(TestDataFactory.create_manager(store=self.branch))
        response = self.client.patch(
            f'/api/v1/admin/vehicles/{self.branch_vehicle.pk}/', {'store_id': self.other.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.branch_vehicle.refresh_from_db()
        self.assertEqual(self.branch_vehicle.store_id, self.branch.pk)


class VehicleRecordTests(TestCase):
    """Create, update, status change and soft delete"""

    def setUp(self):
        self.store = TestDataFactory.create_store()
        self.other_store = TestDataFactory.create_store()
        self.category = TestDataFactory.create_category()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def _payload(self, **overrides):
        payload = {
            'store_id': self.store.pk,
            'category_id': self.category.pk,
            'brand_name': 'Volkswagen',
            'brand_fipe_id': '59',
            'model_name': 'Gol',
            'model_fipe_id': '5585',
            'plate': 'ABC1D23',
            'manufacture_year': 2019,
            'model_year': 2020,
            'mileage': 35000,
            'price': '55000.00',
            'features': ['air conditioning'],
            'specifications': {'doors': 4},
        }
        payload.update(overrides)
        return payload

    def test_create_vehicle_resolves_brand_and_model_by_name(self):
        """Test create vehicle resolves brand and model by name"""
        response = self.client.post('/api/v1/admin/vehicles/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['brand']['name'], 'Volkswagen')
        self.assertEqual(response.data['model']['name'], 'Gol')
        self.assertEqual(response.data['status'], 'Available')
        self.assertEqual(response.data['photos'], [])

    def test_brand_and_model_resolution_is_idempotent(self):
        """Test brand and model resolution is idempotent"""
        self.client.post('/api/v1/admin/vehicles/', self._payload(), format='json')
        response = self.client.post('/api/v1/admin/vehicles/', self._payload(plate='ABC1D24', brand_id=0), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Brand.objects.filter(name='Volkswagen').count(), 1)
        self.assertEqual(VehicleModel.objects.filter(name='Gol').count(), 1)

    def test_create_with_existing_ids(self):
        """Test create with existing brand and model IDs"""
        model = TestDataFactory.create_model()
        payload = self._payload(brand_id=model.brand_id, model_id=model.pk)
        del payload['brand_name']
        del payload['model_name']
        response = self.client.post('/api/v1/admin/vehicles/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['model_id'], model.pk)

    def test_model_of_another_brand_is_rejected(self):
        """Test model of another brand is rejected"""
        model = TestDataFactory.create_model()
        other_brand = TestDataFactory.create_brand()
        payload = self._payload(brand_id=other_brand.pk, model_id=model.pk)
        response = self.client.post('/api/v1/admin/vehicles/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_brand_is_rejected(self):
        """Test missing brand is rejected"""
        payload = self._payload()
        del payload['brand_name']
        response = self.client.post('/api/v1/admin/vehicles/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_store_or_category_is_not_found(self):
        """Test unknown store or category is not found"""
        response = self.client.post('/api/v1/admin/vehicles/', self._payload(store_id=999999), format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.post('/api/v1/admin/vehicles/', self._payload(category_id=999999), format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_plate_is_unique_across_stores(self):
        """Test plate is unique across stores"""
        TestDataFactory.create_vehicle(store=self.store, plate='ABC1D23')
        response = self.client.post(
            '/api/v1/admin/vehicles/', self._payload(store_id=self.other_store.pk), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_plate_of_soft_deleted_vehicle_stays_taken(self):
        """Test plate of soft-deleted vehicle stays taken"""
        vehicle = TestDataFactory.create_vehicle(store=self.store, plate='ABC1D23')
        vehicle.soft_delete()
        response = self.client.post('/api/v1/admin/vehicles/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_plate_uniqueness_is_case_sensitive(self):
        """Test plate uniqueness is case sensitive"""
        TestDataFactory.create_vehicle(store=self.store, plate='ABC1D23')
        response = self.client.post('/api/v1/admin/vehicles/', self._payload(plate='abc1d23'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['plate'], 'abc1d23')
        response = self.client.post(
            '/api/v1/admin/vehicles/', self._payload(plate='ABC1D23', store_id=self.other_store.pk), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_create_in_soft_deleted_store_is_not_found(self):
        """Test create in soft-deleted store is not found"""
        self.other_store.soft_delete()
        response = self.client.post(
            '/api/v1/admin/vehicles/', self._payload(store_id=self.other_store.pk), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(Vehicle.all_objects.filter(plate='ABC1D23').exists())

    def test_create_locks_target_store(self):
        """Test create locks target store"""
        with mock.patch.object(Store.objects, 'select_for_update', wraps=Store.objects.select_for_update) as locked:
            response = self.client.post('/api/v1/admin/vehicles/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        locked.assert_called_once_with()

    def test_store_move_locks_target_store(self):
        """Test store move locks target store"""
        vehicle = TestDataFactory.create_vehicle(store=self.store)
        with mock.patch.object(Store.objects, 'select_for_update', wraps=Store.objects.select_for_update) as locked:
            response = self.client.patch(
                f'/api/v1/admin/vehicles/{vehicle.pk}/', {'store_id': self.other_store.pk}, format='json'
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        locked.assert_called_once_with()
        vehicle.refresh_from_db()
        self.assertEqual(vehicle.store_id, self.other_store.pk)

    def test_update_plate_to_taken_value_conflicts(self):
        """Test update plate to taken value conflicts"""
        TestDataFactory.create_vehicle(store=self.store, plate='TAK1234')
        vehicle = TestDataFactory.create_vehicle(store=self.store)
        response = self.client.patch(f'/api/v1/admin/vehicles/{vehicle.pk}/', {'plate': 'TAK1234'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_partial_update(self):
        """Test partial update"""
        vehicle = TestDataFactory.create_vehicle(store=self.store)
        response = self.client.patch(
            f'/api/v1/admin/vehicles/{vehicle.pk}/', {'price': '41000.00', 'color': 'Blue'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        vehicle.refresh_from_db()
        self.assertEqual(vehicle.price, Decimal('41000.00'))
        self.assertEqual(vehicle.color, 'Blue')

    def test_status_change(self):
        """Test status change"""
        vehicle = TestDataFactory.create_vehicle(store=self.store)
        response = self.client.patch(f'/api/v1/admin/vehicles/{vehicle.pk}/status/', {'status': 'Sold'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Sold')
        response = self.client.patch(f'/api/v1/admin/vehicles/{vehicle.pk}/status/', {'status': 'Lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_is_soft(self):
        """Test delete is soft"""
        vehicle = TestDataFactory.create_vehicle(store=self.store)
        response = self.client.delete(f'/api/v1/admin/vehicles/{vehicle.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertIsNotNone(Vehicle.all_objects.get(pk=vehicle.pk).deleted_at)
        response = self.client.get(f'/api/v1/admin/vehicles/{vehicle.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class VehiclePhotoTests(TestCase):
    """Photo upload limits and the single-cover rule"""

    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)

    def setUp(self):
        self.store = TestDataFactory.create_store()
        self.vehicle = TestDataFactory.create_vehicle(store=self.store)
        self.manager = TestDataFactory.create_manager(store=self.store)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)
        self.url = f'/api/v1/admin/vehicles/{self.vehicle.pk}/photos/'

    def _upload(self, files):
        return self.client.post(self.url, {'files': files}, format='multipart')

    def _images(self, count):
        return [TestDataFactory.image_file(name=f'photo{i}.png') for i in range(count)]

    def _covers(self):
        return list(VehiclePhoto.objects.filter(vehicle=self.vehicle, is_cover=True))

    def test_first_upload_sets_single_cover(self):
        """Test first upload sets single cover"""
        response = self._upload(self._images(3))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['uploaded'], 3)
        photos = list(self.vehicle.photos.order_by('display_order'))
        self.assertEqual([p.display_order for p in photos], [0, 1, 2])
        self.assertEqual(self._covers(), [photos[0]])

    def test_later_upload_keeps_existing_cover(self):
        """Test later upload keeps existing cover"""
        self._upload(self._images(2))
        response = self._upload(self._images(2))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual([p['display_order'] for p in response.data['photos']], [2, 3])
        self.assertFalse(any(p['is_cover'] for p in response.data['photos']))
        self.assertEqual(len(self._covers()), 1)

    def test_too_many_files_rejects_whole_batch(self):
        """Test too many files rejects whole batch"""
        response = self._upload(self._images(11))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.vehicle.photos.count(), 0)

    def test_empty_upload_is_rejected(self):
        """Test empty upload is rejected"""
        response = self.client.post(self.url, {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_image_files_are_skipped(self):
        """Test non-image files are skipped"""
        response = self._upload([TestDataFactory.text_file()] + self._images(2))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['uploaded'], 2)
        self.assertEqual(self.vehicle.photos.count(), 2)
        self.assertEqual(len(self._covers()), 1)

    def test_failed_upload_removes_stored_files(self):
        """Test failed upload removes stored files"""
        media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, media_root, ignore_errors=True)
        original_save = VehiclePhoto.save
        saved = []

        def save_until_third(photo, *args, **kwargs):
            saved.append(photo)
            if len(saved) == 3:
                raise IntegrityError('photo insert failed')
            return original_save(photo, *args, **kwargs)

        with self.settings(MEDIA_ROOT=media_root), \
                mock.patch.object(VehiclePhoto, 'save', autospec=True, side_effect=save_until_third):
            with self.assertRaises(IntegrityError):
                photos.upload_photos(Caller.from_user(self.manager), self.vehicle.pk, self._images(3))

        leftovers = [name for _, _, files in os.walk(media_root) for name in files]
        self.assertEqual(leftovers, [])
        self.assertEqual(self.vehicle.photos.count(), 0)

    def test_set_cover_moves_flag(self):
        """Test set cover moves flag"""
        self._upload(self._images(3))
        third = self.vehicle.photos.get(display_order=2)
        response = self.client.patch(f'{self.url}{third.pk}/cover/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self._covers(), [third])

    def test_reorder_photo(self):
        """Test reorder photo"""
        self._upload(self._images(2))
        first = self.vehicle.photos.get(display_order=0)
        response = self.client.patch(f'{self.url}{first.pk}/order/', {'display_order': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        first.refresh_from_db()
        self.assertEqual(first.display_order, 7)
        response = self.client.patch(f'{self.url}{first.pk}/order/', {'display_order': -1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_deleting_cover_promotes_lowest_display_order(self):
        """Test deleting cover promotes lowest display order"""
        cover = TestDataFactory.create_photo(self.vehicle, is_cover=True, display_order=0)
        later = TestDataFactory.create_photo(self.vehicle, display_order=5)
        lowest = TestDataFactory.create_photo(self.vehicle, display_order=2)
        response = self.client.delete(f'{self.url}{cover.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self._covers(), [lowest])
        later.refresh_from_db()
        self.assertFalse(later.is_cover)

    def test_deleting_last_photo_leaves_no_cover(self):
        """Test deleting last photo leaves no cover"""
        only = TestDataFactory.create_photo(self.vehicle, is_cover=True)
        response = self.client.delete(f'{self.url}{only.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.vehicle.photos.count(), 0)

    def test_deleting_non_cover_keeps_cover(self):
        """Test deleting non-cover keeps cover"""
        cover = TestDataFactory.create_photo(self.vehicle, is_cover=True, display_order=0)
        other = TestDataFactory.create_photo(self.vehicle, display_order=1)
        self.client.delete(f'{self.url}{other.pk}/')
        self.assertEqual(self._covers(), [cover])

    def test_photo_of_other_vehicle_is_not_found(self):
        """Test photo of other vehicle is not found"""
        other_vehicle = TestDataFactory.create_vehicle(store=self.store)
        photo = TestDataFactory.create_photo(other_vehicle, is_cover=True)
        response = self.client.delete(f'{self.url}{photo.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_upload_outside_scope_is_forbidden(self):
        """Test upload outside scope is forbidden"""
        outsider = TestDataFactory.create_manager(store=TestDataFactory.create_store())
        self.client.authenticate_user(outsider)
        response = self._upload(self._images(1))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.vehicle.photos.count(), 0)
