from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .exceptions import Conflict, InvalidInput, NotFound
from .models import User


class UserSerializer(serializers.ModelSerializer):
    store_id = serializers.IntegerField(read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'name', 'role', 'store_id', 'store_name',
                  'is_active', 'created_at', 'updated_at']
        read_only_fields = fields


class UserWriteSerializer(serializers.ModelSerializer):
    """
    Create/update payload for back-office users.

    Role/store consistency: a manager must be bound to an existing store,
    an admin must not be bound to any store.
    """
    password = serializers.CharField(write_only=True, required=False, validators=[validate_password])
    store_id = serializers.IntegerField(required=False, allow_null=True)

    class Meta:
        model = User
        fields = ['username', 'email', 'name', 'password', 'role', 'store_id', 'is_active']
        extra_kwargs = {
            # uniqueness is reported as a conflict, not a field error
            'username': {'validators': []},
            'email': {'validators': []},
        }

    def validate_username(self, value):
        qs = User.objects.filter(username=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise Conflict(f"Username '{value}' is already in use.")
        return value

    def validate_email(self, value):
        qs = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise Conflict(f"Email '{value}' is already in use.")
        return value

    def validate(self, attrs):
        from backend.locations.models import Store

        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'This field is required.'})

        role = attrs.get('role', getattr(self.instance, 'role', User.ROLE_MANAGER))
        if 'store_id' in attrs:
            store_id = attrs['store_id']
        else:
            store_id = getattr(self.instance, 'store_id', None)

        if role == User.ROLE_ADMIN:
            if store_id is not None:
                raise InvalidInput('Admin users cannot be bound to a store.')
        else:
            if store_id is None:
                raise InvalidInput('Manager users must be bound to a store.')
            if not Store.objects.filter(pk=store_id).exists():
                raise NotFound(f'Store {store_id} not found.')

        attrs['role'] = role
        attrs['store_id'] = store_id
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
