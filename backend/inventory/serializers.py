from rest_framework import serializers
from backend.catalog.serializers import CategorySerializer, BrandSerializer
from backend.catalog.models import VehicleModel
from backend.locations.serializers import StoreSummarySerializer
from .models import Vehicle, VehiclePhoto


class VehiclePhotoSerializer(serializers.ModelSerializer):
    url = serializers.CharField(read_only=True)

    class Meta:
        model = VehiclePhoto
        fields = ['id', 'vehicle_id', 'url', 'is_cover', 'display_order', 'created_at']
        read_only_fields = fields


class VehicleModelSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = VehicleModel
        fields = ['id', 'name', 'model_fipe_id', 'brand_id']


class VehicleSerializer(serializers.ModelSerializer):
    """Full nested vehicle record used by the back office"""
    store = StoreSummarySerializer(read_only=True)
    category = CategorySerializer(read_only=True)
    brand = BrandSerializer(read_only=True)
    model = VehicleModelSummarySerializer(read_only=True)
    photos = VehiclePhotoSerializer(many=True, read_only=True)

    class Meta:
        model = Vehicle
        fields = ['id', 'store_id', 'store', 'category_id', 'category', 'brand_id', 'brand',
                  'model_id', 'model', 'vehicle_type', 'plate', 'manufacture_year', 'model_year',
                  'mileage', 'color', 'fuel_type', 'price', 'fipe_code', 'fipe_value', 'description',
                  'status', 'home_highlight', 'brand_highlight', 'features', 'specifications',
                  'photos', 'created_at', 'updated_at']
        read_only_fields = fields


class VehicleWriteSerializer(serializers.ModelSerializer):
    """
    Create/update payload.

    ``brand_id``/``model_id`` missing or 0 means "resolve by name":
    ``brand_name``/``model_name`` are then looked up and created if absent.
    """
    store_id = serializers.IntegerField()
    category_id = serializers.IntegerField()
    brand_id = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    brand_name = serializers.CharField(required=False, max_length=100)
    brand_fipe_id = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    model_id = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    model_name = serializers.CharField(required=False, max_length=200)
    model_fipe_id = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    plate = serializers.CharField(min_length=7, max_length=10)
    manufacture_year = serializers.IntegerField(min_value=1900)
    model_year = serializers.IntegerField(min_value=1900)
    mileage = serializers.IntegerField(min_value=0, required=False)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    features = serializers.ListField(child=serializers.CharField(), required=False)
    specifications = serializers.DictField(required=False)

    class Meta:
        model = Vehicle
        fields = ['store_id', 'category_id', 'brand_id', 'brand_name', 'brand_fipe_id',
                  'model_id', 'model_name', 'model_fipe_id', 'vehicle_type', 'plate',
                  'manufacture_year', 'model_year', 'mileage', 'color', 'fuel_type', 'price',
                  'fipe_code', 'fipe_value', 'description', 'status', 'home_highlight',
                  'brand_highlight', 'features', 'specifications']

    def validate(self, attrs):
        partial = self.partial
        if not partial or 'brand_id' in attrs or 'brand_name' in attrs:
            if not attrs.get('brand_id') and not attrs.get('brand_name'):
                raise serializers.ValidationError({'brand_name': 'Required when brand_id is not given.'})
        if not partial or 'model_id' in attrs or 'model_name' in attrs:
            if not attrs.get('model_id') and not attrs.get('model_name'):
                raise serializers.ValidationError({'model_name': 'Required when model_id is not given.'})
        return attrs


class VehicleStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Vehicle.STATUS_CHOICES)


class PhotoOrderSerializer(serializers.Serializer):
    display_order = serializers.IntegerField(min_value=0)
