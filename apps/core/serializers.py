"""
Shared serializer helpers.
"""
from rest_framework import serializers


class RejectUnknownFieldsMixin:
    """
    Reject payload keys that are not writable fields of the serializer.

    DRF silently drops unknown keys; mutation payloads here are allow-listed,
    so an unexpected key is a caller error.
    """

    def validate(self, attrs):
        attrs = super().validate(attrs)

        writable = {name for name, field in self.fields.items() if not field.read_only}
        unknown = sorted(set(getattr(self, 'initial_data', {}) or {}) - writable)
        if unknown:
            raise serializers.ValidationError({name: ['Unknown field.'] for name in unknown})

        return attrs
