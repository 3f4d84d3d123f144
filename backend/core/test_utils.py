"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.locations.models import Store
from backend.catalog.models import Category, Brand, VehicleModel
from backend.inventory.models import Vehicle, VehiclePhoto
from decimal import Decimal
from io import BytesIO
from PIL import Image
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def random_digits(length):
        return ''.join(random.choices(string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='manager', store=None, name=''):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            store=store,
            name=name,
        )

    @staticmethod
    def create_admin(**kwargs):
        return TestDataFactory.create_user(role='admin', **kwargs)

    @staticmethod
    def create_manager(store, **kwargs):
        return TestDataFactory.create_user(role='manager', store=store, **kwargs)

    @staticmethod
    def create_store(name=None, cnpj=None, parent=None):
        """Create a test store"""
        if not name:
            name = f'Store_{TestDataFactory.random_string(6)}'
        if not cnpj:
            digits = TestDataFactory.random_digits(14)
            cnpj = f'{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}'
        return Store.objects.create(
            name=name,
            cnpj=cnpj,
            address=f'Test Address {name}',
            phone='(11) 90000-0000',
            parent=parent,
        )

    @staticmethod
    def create_category(name=None, active=True):
        """Create a test category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return Category.objects.create(name=name, icon='🚗', active=active)

    @staticmethod
    def create_brand(name=None, brand_fipe_id=None):
        """Create a test brand"""
        if not name:
            name = f'Brand_{TestDataFactory.random_string(6)}'
        return Brand.objects.create(name=name, brand_fipe_id=brand_fipe_id)

    @staticmethod
    def create_model(brand=None, name=None, model_fipe_id=None):
        """Create a test vehicle model"""
        if not brand:
            brand = TestDataFactory.create_brand()
        if not name:
            name = f'Model_{TestDataFactory.random_string(6)}'
        return VehicleModel.objects.create(brand=brand, name=name, model_fipe_id=model_fipe_id)

    @staticmethod
    def create_vehicle(store, plate=None, category=None, brand=None, model=None, price=None,
                       model_year=2020, mileage=10000, status='Available', **extra):
        """Create a test vehicle"""
        if not plate:
            plate = f'{TestDataFactory.random_string(3).upper()}{TestDataFactory.random_digits(4)}'
        if not category:
            category = TestDataFactory.create_category()
        if not model:
            model = TestDataFactory.create_model(brand=brand)
        if not brand:
            brand = model.brand
        if price is None:
            price = Decimal('50000.00')
        return Vehicle.objects.create(
            store=store,
            category=category,
            brand=brand,
            model=model,
            plate=plate,
            manufacture_year=model_year,
            model_year=model_year,
            mileage=mileage,
            price=price,
            status=status,
            **extra
        )

    @staticmethod
    def create_photo(vehicle, is_cover=False, display_order=0):
        """Create a photo row with a tiny stored image"""
        photo = VehiclePhoto(vehicle=vehicle, is_cover=is_cover, display_order=display_order)
        photo.image.save(f'{vehicle.pk}_{display_order}.png', TestDataFactory.image_file(), save=False)
        photo.save()
        return photo

    @staticmethod
    def image_file(name='photo.png', size=(4, 4), color='red'):
        """In-memory PNG upload"""
        buffer = BytesIO()
        Image.new('RGB', size, color).save(buffer, format='PNG')
        return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')

    @staticmethod
    def text_file(name='notes.txt'):
        return SimpleUploadedFile(name, b'not an image', content_type='text/plain')


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
