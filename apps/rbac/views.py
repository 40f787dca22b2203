"""
User management REST API views (Admin only).
"""
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import NotFound, ValidationError
from apps.core.permissions import requires_roles
from apps.rbac.models import Role
from apps.rbac.serializers import UserSerializer, UserUpdateSerializer
from apps.rbac.services import UserService


@extend_schema_view(
    get=extend_schema(
        tags=['Users'],
        summary='List users',
        description='List all users ordered by username. Password hashes are never included.',
        responses={200: UserSerializer(many=True)},
    )
)
@requires_roles(Role.ADMIN)
class UserListView(APIView):
    """
    GET /api/users

    List users. Admin only.
    """

    def get(self, request):
        serializer = UserSerializer(UserService.list_users(), many=True)
        return Response(serializer.data)


@extend_schema_view(
    get=extend_schema(
        tags=['Users'],
        summary='Get user',
        responses={200: UserSerializer, 404: OpenApiTypes.OBJECT},
    ),
    patch=extend_schema(
        tags=['Users'],
        summary='Update user',
        description='''
Change a user's username, password and/or role. Other fields are rejected.

Role changes take effect on the user's next request: the token is not
re-issued, but the stored role is what every request is authorized against.
        ''',
        request=UserUpdateSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiTypes.OBJECT,
            404: OpenApiTypes.OBJECT,
            409: OpenApiTypes.OBJECT,
        },
    ),
    delete=extend_schema(
        tags=['Users'],
        summary='Delete user',
        description='Delete a user. Records they created keep the dangling reference.',
        responses={200: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
    ),
)
@requires_roles(Role.ADMIN)
class UserDetailView(APIView):
    """
    GET/PATCH/DELETE /api/users/{user_id}

    Admin only.
    """

    def get(self, request, user_id):
        user = UserService.get_user(user_id)
        if user is None:
            raise NotFound('User not found')
        return Response(UserSerializer(user).data)

    def patch(self, request, user_id):
        serializer = UserUpdateSerializer(data=request.data)

        if not serializer.is_valid():
            raise ValidationError('Invalid request data', details=serializer.errors)

        user = UserService.update_user(user_id, **serializer.validated_data)
        return Response(UserSerializer(user).data)

    def delete(self, request, user_id):
        UserService.delete_user(user_id)
        return Response(
            {'message': 'User deleted successfully'},
            status=status.HTTP_200_OK
        )
