"""
Serializers for transaction records.
"""
from rest_framework import serializers

from apps.core.serializers import RejectUnknownFieldsMixin
from apps.records.models import TransactionRecord


class RecordCreateSerializer(RejectUnknownFieldsMixin, serializers.Serializer):
    """Serializer for creating records. References are resolved by the service."""

    date = serializers.DateField()
    source_name = serializers.CharField(max_length=255)
    target_name = serializers.CharField(max_length=255)
    description = serializers.CharField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    employee_name = serializers.CharField(max_length=255)


class RecordUpdateSerializer(RejectUnknownFieldsMixin, serializers.Serializer):
    """Serializer for partial record updates."""

    date = serializers.DateField(required=False)
    source_name = serializers.CharField(max_length=255, required=False)
    target_name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    employee_name = serializers.CharField(max_length=255, required=False)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class TransactionRecordSerializer(serializers.ModelSerializer):
    """
    Record as returned by the API.

    created_by_username and last_modified_by_username come from the
    `usernames` context map and are null for deleted users.
    """

    created_by_username = serializers.SerializerMethodField()
    last_modified_by_username = serializers.SerializerMethodField()

    class Meta:
        model = TransactionRecord
        fields = [
            'id', 'date',
            'source_name', 'source_snapshot',
            'target_name', 'target_snapshot',
            'description', 'amount',
            'employee_name', 'employee_snapshot',
            'created_by', 'created_by_username',
            'last_modified_by', 'last_modified_by_username',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def _username(self, user_id):
        if user_id is None:
            return None
        return self.context.get('usernames', {}).get(user_id)

    def get_created_by_username(self, obj):
        return self._username(obj.created_by)

    def get_last_modified_by_username(self, obj):
        return self._username(obj.last_modified_by)
