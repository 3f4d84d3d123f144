from rest_framework import serializers
from backend.inventory.models import Vehicle
from backend.inventory.serializers import VehiclePhotoSerializer


def cover_photo(vehicle):
    """The photo flagged as cover, else the first one by display order"""
    photos = list(vehicle.photos.all())
    for photo in photos:
        if photo.is_cover:
            return photo
    return min(photos, key=lambda p: (p.display_order, p.pk)) if photos else None


class PublicVehicleListSerializer(serializers.ModelSerializer):
    """Flattened storefront row"""
    brand_name = serializers.CharField(source='brand.name', read_only=True)
    brand_fipe_id = serializers.CharField(source='brand.brand_fipe_id', read_only=True)
    model_name = serializers.CharField(source='model.name', read_only=True)
    model_fipe_id = serializers.CharField(source='model.model_fipe_id', read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)
    category_name = serializers.CharField(source='category.name', read_only=True)
    cover_photo_url = serializers.SerializerMethodField()

    class Meta:
        model = Vehicle
        fields = ['id', 'plate', 'brand_name', 'brand_fipe_id', 'model_name', 'model_fipe_id',
                  'model_year', 'manufacture_year', 'price', 'mileage', 'color', 'fuel_type',
                  'status', 'cover_photo_url', 'store_name', 'category_name',
                  'home_highlight', 'brand_highlight']
        read_only_fields = fields

    def get_cover_photo_url(self, obj):
        photo = cover_photo(obj)
        return photo.url if photo else None


class PublicVehicleDetailSerializer(serializers.ModelSerializer):
    category = serializers.SerializerMethodField()
    store = serializers.SerializerMethodField()
    brand = serializers.SerializerMethodField()
    model = serializers.SerializerMethodField()
    photos = VehiclePhotoSerializer(many=True, read_only=True)

    class Meta:
        model = Vehicle
        fields = ['id', 'plate', 'vehicle_type', 'model_year', 'manufacture_year', 'mileage', 'color',
                  'fuel_type', 'price', 'fipe_code', 'fipe_value', 'description', 'status',
                  'home_highlight', 'brand_highlight', 'features', 'specifications',
                  'category', 'store', 'brand', 'model', 'photos', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_category(self, obj):
        return {'id': obj.category.id, 'name': obj.category.name, 'icon': obj.category.icon}

    def get_store(self, obj):
        store = obj.store
        return {'id': store.id, 'name': store.name, 'cnpj': store.cnpj,
                'address': store.address, 'phone': store.phone}

    def get_brand(self, obj):
        brand = obj.brand
        return {'id': brand.id, 'name': brand.name, 'logo': brand.logo, 'brand_fipe_id': brand.brand_fipe_id}

    def get_model(self, obj):
        return {'id': obj.model.id, 'name': obj.model.name, 'model_fipe_id': obj.model.model_fipe_id}
