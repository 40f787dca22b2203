"""
Serializers for catalog entries.

Uniqueness validators are removed from the generated fields: duplicate
names are reported by the registry as DUPLICATE_NAME (409) rather than as
a 400 validation error.
"""
from rest_framework import serializers

from apps.catalog.models import Account, Employee, Project
from apps.core.serializers import RejectUnknownFieldsMixin


class LookupSerializer(RejectUnknownFieldsMixin, serializers.ModelSerializer):
    """Base serializer used for both input validation and output."""

    class Meta:
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'validators': []},
            'code': {'validators': []},
        }

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("Name cannot be empty.")
        return value.strip()


class AccountSerializer(LookupSerializer):

    class Meta(LookupSerializer.Meta):
        model = Account
        fields = [
            'id', 'name', 'code', 'account_type', 'account_type_code',
            'sub_account', 'sub_account_code', 'financial_statement',
            'created_by', 'created_at', 'updated_at',
        ]


class EmployeeSerializer(LookupSerializer):

    class Meta(LookupSerializer.Meta):
        model = Employee
        fields = ['id', 'name', 'title', 'code', 'created_by', 'created_at', 'updated_at']


class ProjectSerializer(LookupSerializer):

    class Meta(LookupSerializer.Meta):
        model = Project
        fields = ['id', 'name', 'code', 'created_by', 'created_at', 'updated_at']
