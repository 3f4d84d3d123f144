from rest_framework import serializers
from .models import Category, Brand, VehicleModel


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'icon', 'active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'name': {'validators': []}}


class BrandSerializer(serializers.ModelSerializer):
    class Meta:
        model = Brand
        fields = ['id', 'name', 'brand_fipe_id', 'logo', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'name': {'validators': []}}


class VehicleModelSerializer(serializers.ModelSerializer):
    brand_id = serializers.IntegerField()
    brand_name = serializers.CharField(source='brand.name', read_only=True)

    class Meta:
        model = VehicleModel
        fields = ['id', 'brand_id', 'brand_name', 'name', 'model_fipe_id', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        # (brand, name) uniqueness is reported as a conflict by the taxonomy service
        validators = []
