"""
REST API views for transaction records.
"""
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiExample
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import ValidationError
from apps.core.permissions import requires_roles
from apps.rbac.models import Role
from apps.records.serializers import (
    RecordCreateSerializer, RecordUpdateSerializer, TransactionRecordSerializer,
)
from apps.records.services import RecordService


def serialize_records(records, many=False):
    """Serialize records with creator/modifier usernames resolved in one query."""
    items = list(records) if many else [records]
    context = {'usernames': RecordService.usernames_for(items)}
    return TransactionRecordSerializer(items if many else records, many=many, context=context).data


class RecordListView(APIView):
    """
    List or create records.

    GET  /api/records - newest first
    POST /api/records
    """

    @extend_schema(
        summary="List records",
        description="All records ordered by creation time, newest first.",
        responses={200: TransactionRecordSerializer(many=True)},
        tags=['Records']
    )
    def get(self, request):
        return Response(serialize_records(RecordService.list(), many=True))

    @extend_schema(
        summary="Create record",
        description='''
Create a record. source_name and target_name must name existing accounts
and employee_name an existing employee; their current attributes are copied
into the record's snapshots.
        ''',
        request=RecordCreateSerializer,
        responses={
            201: TransactionRecordSerializer,
            400: OpenApiTypes.OBJECT,
        },
        examples=[
            OpenApiExample(
                'Create Request',
                value={
                    'date': '2024-01-31',
                    'source_name': 'Cash',
                    'target_name': 'Office Supplies',
                    'description': 'Printer paper',
                    'amount': '100.00',
                    'employee_name': 'Alice'
                },
                request_only=True
            ),
            OpenApiExample(
                'Unknown Account',
                value={
                    'error': {
                        'code': 'INVALID_REFERENCE',
                        'message': 'Invalid account selection',
                        'details': {'source_name': 'Petty Cash'}
                    }
                },
                response_only=True,
                status_codes=['400']
            ),
        ],
        tags=['Records']
    )
    def post(self, request):
        serializer = RecordCreateSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError('Invalid request data', details=serializer.errors)

        record = RecordService.create(dict(serializer.validated_data), acting_user=request.user)
        return Response(serialize_records(record), status=status.HTTP_201_CREATED)


class RecordDetailView(APIView):
    """
    Retrieve, update, or delete a record.

    GET    /api/records/{id}
    PATCH  /api/records/{id}
    DELETE /api/records/{id} - Admin only
    """

    @extend_schema(
        summary="Get record",
        responses={200: TransactionRecordSerializer, 404: OpenApiTypes.OBJECT},
        tags=['Records']
    )
    def get(self, request, record_id):
        return Response(serialize_records(RecordService.get(record_id)))

    @extend_schema(
        summary="Update record",
        description='''
Partial update. Supplied fields are stored as given. A supplied account or
employee name that exists refreshes the matching snapshot from the catalog;
a name that does not exist leaves the previous snapshot in place.
        ''',
        request=RecordUpdateSerializer,
        responses={
            200: TransactionRecordSerializer,
            400: OpenApiTypes.OBJECT,
            404: OpenApiTypes.OBJECT,
        },
        tags=['Records']
    )
    def patch(self, request, record_id):
        serializer = RecordUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError('Invalid request data', details=serializer.errors)

        record = RecordService.update(record_id, dict(serializer.validated_data), acting_user=request.user)
        return Response(serialize_records(record))

    @extend_schema(
        summary="Delete record (Admin)",
        responses={200: OpenApiTypes.OBJECT, 403: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        tags=['Records']
    )
    @requires_roles(Role.ADMIN)
    def delete(self, request, record_id):
        RecordService.delete(record_id, acting_user=request.user)
        return Response(
            {'message': 'Record deleted successfully'},
            status=status.HTTP_200_OK
        )
