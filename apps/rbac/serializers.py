"""
RBAC serializers for REST API endpoints.

Provides serialization for:
- Authentication (registration, login)
- Users (output and admin updates)
"""
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from apps.core.serializers import RejectUnknownFieldsMixin
from apps.rbac.models import User, Role


# ===== AUTHENTICATION SERIALIZERS =====

class RegistrationSerializer(RejectUnknownFieldsMixin, serializers.Serializer):
    """Serializer for Admin-driven user registration."""

    username = serializers.CharField(required=True, max_length=150)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=Role.choices, required=True)

    def validate_username(self, value):
        """Validate username is not blank after trimming."""
        if not value.strip():
            raise serializers.ValidationError("Username cannot be empty.")
        return value.strip()

    def validate_password(self, value):
        """Apply AUTH_PASSWORD_VALIDATORS."""
        validate_password(value)
        return value


class LoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    username = serializers.CharField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


# ===== USER SERIALIZERS =====

class UserSummarySerializer(serializers.ModelSerializer):
    """Identity as returned by login and /auth/me."""

    class Meta:
        model = User
        fields = ['id', 'username', 'role']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Serializer for user listings. Never exposes the password hash."""

    class Meta:
        model = User
        fields = ['id', 'username', 'role', 'created_at', 'updated_at', 'last_login_at']
        read_only_fields = fields


class UserUpdateSerializer(RejectUnknownFieldsMixin, serializers.Serializer):
    """Serializer for Admin updates of username, password and role."""

    username = serializers.CharField(required=False, max_length=150)
    password = serializers.CharField(
        required=False,
        write_only=True,
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=Role.choices, required=False)

    def validate_username(self, value):
        if not value.strip():
            raise serializers.ValidationError("Username cannot be empty.")
        return value.strip()

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if not attrs:
            raise serializers.ValidationError("At least one of username, password or role is required.")
        return attrs
