"""
REST API views for the catalogs (accounts, employees, projects).

Every catalog exposes the same surface:
    GET    /api/{catalog}              any authenticated user
    POST   /api/{catalog}              Admin
    GET    /api/{catalog}/{id}         any authenticated user
    PATCH  /api/{catalog}/{id}         Admin
    DELETE /api/{catalog}/{id}         Admin
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.catalog import services
from apps.catalog.serializers import AccountSerializer, EmployeeSerializer, ProjectSerializer
from apps.core.exceptions import ValidationError
from apps.core.permissions import HasRole
from apps.rbac.models import Role


class CatalogPermissionsMixin:
    """Reads are open to any authenticated user; writes need Admin."""
    permission_classes = [HasRole]

    def check_permissions(self, request):
        """Set required roles based on HTTP method before permission check."""
        if request.method in ('GET', 'HEAD', 'OPTIONS'):
            self.required_roles = None
        else:
            self.required_roles = {Role.ADMIN}
        super().check_permissions(request)


class LookupListView(CatalogPermissionsMixin, APIView):
    """List entries or create one."""
    registry = None
    serializer_class = None

    def get(self, request):
        serializer = self.serializer_class(self.registry.list(), many=True)
        return Response(serializer.data)

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        if not serializer.is_valid():
            raise ValidationError('Invalid request data', details=serializer.errors)

        entity = self.registry.create(dict(serializer.validated_data), acting_user=request.user)
        return Response(self.serializer_class(entity).data, status=status.HTTP_201_CREATED)


class LookupDetailView(CatalogPermissionsMixin, APIView):
    """Retrieve, update, or delete one entry."""
    registry = None
    serializer_class = None

    def get(self, request, entity_id):
        entity = self.registry.get(entity_id)
        return Response(self.serializer_class(entity).data)

    def patch(self, request, entity_id):
        serializer = self.serializer_class(data=request.data, partial=True)
        if not serializer.is_valid():
            raise ValidationError('Invalid request data', details=serializer.errors)

        entity = self.registry.update(entity_id, dict(serializer.validated_data))
        return Response(self.serializer_class(entity).data)

    def delete(self, request, entity_id):
        self.registry.delete(entity_id)
        return Response(
            {'message': f'{self.registry.label} deleted successfully'},
            status=status.HTTP_200_OK
        )


def list_schema(tag, serializer_class):
    return extend_schema_view(
        get=extend_schema(
            tags=[tag],
            summary=f'List {tag.lower()}',
            responses={200: serializer_class(many=True)},
        ),
        post=extend_schema(
            tags=[tag],
            summary='Create entry (Admin)',
            request=serializer_class,
            responses={
                201: serializer_class,
                400: OpenApiTypes.OBJECT,
                403: OpenApiTypes.OBJECT,
                409: OpenApiTypes.OBJECT,
            },
        ),
    )


def detail_schema(tag, serializer_class):
    return extend_schema_view(
        get=extend_schema(
            tags=[tag],
            summary='Get entry',
            responses={200: serializer_class, 404: OpenApiTypes.OBJECT},
        ),
        patch=extend_schema(
            tags=[tag],
            summary='Update entry (Admin)',
            description='Partial update. Existing records keep the values they were saved with.',
            request=serializer_class,
            responses={
                200: serializer_class,
                400: OpenApiTypes.OBJECT,
                403: OpenApiTypes.OBJECT,
                404: OpenApiTypes.OBJECT,
                409: OpenApiTypes.OBJECT,
            },
        ),
        delete=extend_schema(
            tags=[tag],
            summary='Delete entry (Admin)',
            description='Hard delete. Existing records keep their snapshot of the entry.',
            responses={200: OpenApiTypes.OBJECT, 403: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        ),
    )


@list_schema('Accounts', AccountSerializer)
class AccountListView(LookupListView):
    """GET/POST /api/accounts"""
    registry = services.accounts
    serializer_class = AccountSerializer


@detail_schema('Accounts', AccountSerializer)
class AccountDetailView(LookupDetailView):
    """GET/PATCH/DELETE /api/accounts/{id}"""
    registry = services.accounts
    serializer_class = AccountSerializer


@list_schema('Employees', EmployeeSerializer)
class EmployeeListView(LookupListView):
    """GET/POST /api/employees"""
    registry = services.employees
    serializer_class = EmployeeSerializer


@detail_schema('Employees', EmployeeSerializer)
class EmployeeDetailView(LookupDetailView):
    """GET/PATCH/DELETE /api/employees/{id}"""
    registry = services.employees
    serializer_class = EmployeeSerializer


@list_schema('Projects', ProjectSerializer)
class ProjectListView(LookupListView):
    """GET/POST /api/projects"""
    registry = services.projects
    serializer_class = ProjectSerializer


@detail_schema('Projects', ProjectSerializer)
class ProjectDetailView(LookupDetailView):
    """GET/PATCH/DELETE /api/projects/{id}"""
    registry = services.projects
    serializer_class = ProjectSerializer
