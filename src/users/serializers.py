from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from django.core import exceptions as django_exc

from .models import CustomUser


class RegistrationSerializer(serializers.ModelSerializer):
    """Registration payload -> creates a regular user and hashes password."""
    password = serializers.CharField(write_only=True, required=True, style={'input_type': 'password'})
    phone_number = serializers.CharField(required=False, allow_blank=True, max_length=30)
    department = serializers.CharField(required=False, allow_blank=True, max_length=100)

    class Meta:
        model = CustomUser
        fields = ('email', 'password', 'first_name', 'last_name', 'phone_number', 'department')

    def validate_password(self, value):
        """Run Django's password validators (AUTH_PASSWORD_VALIDATORS)."""
        try:
            validate_password(value)
        except django_exc.ValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    def create(self, validated_data):
        return CustomUser.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            first_name=validated_data.get('first_name', ''),
            last_name=validated_data.get('last_name', ''),
            phone_number=validated_data.get('phone_number', ''),
            department=validated_data.get('department', ''),
        )


class CustomUserSerializer(serializers.ModelSerializer):
    """Representation of a user; role/active are read-only for API clients."""
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = CustomUser
        fields = (
            'id', 'email', 'first_name', 'last_name', 'full_name',
            'phone_number', 'department', 'role', 'is_active', 'date_joined',
        )
        read_only_fields = ('id', 'email', 'role', 'is_active', 'date_joined')


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(required=True, write_only=True, style={'input_type': 'password'})
