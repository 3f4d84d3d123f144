from rest_framework import serializers
from .models import Store


class StoreSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = ['id', 'name', 'cnpj']


class StoreSerializer(serializers.ModelSerializer):
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    parent = StoreSummarySerializer(read_only=True)
    branches = StoreSummarySerializer(many=True, read_only=True)

    class Meta:
        model = Store
        fields = ['id', 'name', 'cnpj', 'address', 'phone', 'parent_id', 'parent', 'branches',
                  'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            # duplicates are reported as a conflict by the store service
            'cnpj': {'validators': []},
        }


class PublicStoreSerializer(serializers.ModelSerializer):
    parent = StoreSummarySerializer(read_only=True)

    class Meta:
        model = Store
        fields = ['id', 'name', 'address', 'phone', 'parent']
