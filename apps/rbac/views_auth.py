"""
Authentication REST API views.

Implements endpoints for:
- User registration (Admin only)
- Login
- Logout
- Current identity
"""
import logging

from django.conf import settings
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiExample
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import InvalidCredentials, ValidationError, error_payload
from apps.core.permissions import requires_roles
from apps.rbac.models import Role
from apps.rbac.serializers import (
    RegistrationSerializer, LoginSerializer, UserSummarySerializer,
)
from apps.rbac.services import AuthService

logger = logging.getLogger(__name__)


def login_rate(group, request):
    """Rate for the login endpoint, read from settings on every call."""
    return settings.LOGIN_RATE_LIMIT


@extend_schema(
    tags=['Authentication'],
    summary='Register new user',
    description='''
Create a user with a role. Only Admins can register users.

**Authentication required**: Admin role.
    ''',
    request=RegistrationSerializer,
    responses={
        201: OpenApiTypes.OBJECT,
        400: OpenApiTypes.OBJECT,
        403: OpenApiTypes.OBJECT,
        409: OpenApiTypes.OBJECT,
    },
    examples=[
        OpenApiExample(
            'Registration Request',
            value={
                'username': 'jdoe',
                'password': 'SecurePass123!',
                'role': 'Accountant'
            },
            request_only=True
        ),
        OpenApiExample(
            'Success Response',
            value={
                'user_id': '123e4567-e89b-12d3-a456-426614174000',
                'message': 'User registered successfully'
            },
            response_only=True
        ),
        OpenApiExample(
            'Username Taken',
            value={
                'error': {
                    'code': 'DUPLICATE_USERNAME',
                    'message': "Username 'jdoe' already exists"
                }
            },
            response_only=True,
            status_codes=['409']
        ),
    ]
)
@requires_roles(Role.ADMIN)
class RegistrationView(APIView):
    """
    POST /api/auth/register

    Register a new user. Admin only.
    """

    def post(self, request):
        """Register new user."""
        serializer = RegistrationSerializer(data=request.data)

        if not serializer.is_valid():
            raise ValidationError('Invalid request data', details=serializer.errors)

        user = AuthService.register_user(
            username=serializer.validated_data['username'],
            password=serializer.validated_data['password'],
            role=serializer.validated_data['role'],
            registered_by=request.user,
        )

        return Response(
            {
                'user_id': str(user.id),
                'message': 'User registered successfully'
            },
            status=status.HTTP_201_CREATED
        )


@extend_schema(
    tags=['Authentication'],
    summary='Login',
    description='''
Authenticate with username and password and receive a session token.

The token is valid for JWT_EXPIRATION_HOURS (24 by default) and must be sent
as `Authorization: Bearer <token>` on every other endpoint.

**No authentication required** - this is a public endpoint.

**Rate limit**: LOGIN_RATE_LIMIT per IP (5/minute by default)
    ''',
    request=LoginSerializer,
    responses={
        200: OpenApiTypes.OBJECT,
        400: OpenApiTypes.OBJECT,
        401: OpenApiTypes.OBJECT,
        429: OpenApiTypes.OBJECT,
    },
    examples=[
        OpenApiExample(
            'Login Request',
            value={
                'username': 'admin',
                'password': 'admin123'
            },
            request_only=True
        ),
        OpenApiExample(
            'Success Response',
            value={
                'token': 'eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...',
                'user': {
                    'id': '123e4567-e89b-12d3-a456-426614174000',
                    'username': 'admin',
                    'role': 'Admin'
                }
            },
            response_only=True
        ),
        OpenApiExample(
            'Invalid Credentials',
            value={
                'error': {
                    'code': 'INVALID_CREDENTIALS',
                    'message': 'Invalid credentials'
                }
            },
            response_only=True,
            status_codes=['401']
        ),
        OpenApiExample(
            'Rate Limit Exceeded',
            value={
                'error': {
                    'code': 'RATE_LIMIT_EXCEEDED',
                    'message': 'Rate limit exceeded. Please try again later.',
                    'details': {'retry_after': 60}
                }
            },
            response_only=True,
            status_codes=['429']
        )
    ]
)
@method_decorator(ratelimit(key='ip', rate=login_rate, method='POST', block=False), name='dispatch')
class LoginView(APIView):
    """
    POST /api/auth/login

    Authenticate user and return JWT token.

    No authentication required.
    Rate limited per IP address.
    """
    authentication_classes = []
    permission_classes = []

    def post(self, request):
        """Login user."""
        from apps.core.logging import SecurityLogger

        ip_address = request.META.get('REMOTE_ADDR', 'unknown')

        # Check if rate limited
        if getattr(request, 'limited', False):
            username = request.data.get('username') if isinstance(request.data, dict) else None

            SecurityLogger.log_rate_limit_exceeded(
                endpoint=request.path,
                ip_address=ip_address,
                username=username,
                limit=f'{settings.LOGIN_RATE_LIMIT} per IP'
            )

            retry_after = 60
            response = Response(
                error_payload(
                    'RATE_LIMIT_EXCEEDED',
                    'Rate limit exceeded. Please try again later.',
                    details={'retry_after': retry_after},
                    request_id=getattr(request, 'request_id', None),
                ),
                status=status.HTTP_429_TOO_MANY_REQUESTS
            )
            response['Retry-After'] = str(retry_after)
            return response

        serializer = LoginSerializer(data=request.data)

        if not serializer.is_valid():
            raise ValidationError('Invalid request data', details=serializer.errors)

        try:
            result = AuthService.login(
                username=serializer.validated_data['username'],
                password=serializer.validated_data['password']
            )
        except InvalidCredentials:
            SecurityLogger.log_failed_login(
                username=serializer.validated_data['username'],
                ip_address=ip_address,
                user_agent=request.META.get('HTTP_USER_AGENT', 'unknown'),
            )
            raise

        return Response(
            {
                'token': result['token'],
                'user': UserSummarySerializer(result['user']).data,
            },
            status=status.HTTP_200_OK
        )


@extend_schema(
    tags=['Authentication'],
    summary='Logout',
    description='''
Acknowledge logout. Tokens are stateless: the client discards its token,
which otherwise stays valid until it expires.
    ''',
    request=None,
    responses={200: OpenApiTypes.OBJECT, 401: OpenApiTypes.OBJECT}
)
class LogoutView(APIView):
    """
    POST /api/auth/logout

    Logout user (client-side token clearing).

    Requires JWT authentication.
    """

    def post(self, request):
        """Logout user."""
        logger.info(
            f"User logged out: {request.user.username}",
            extra={'user_id': str(request.user.id)}
        )

        # Since JWT is stateless, logout is handled client-side
        # This endpoint serves as a confirmation
        return Response(
            {
                'message': 'Logout successful'
            },
            status=status.HTTP_200_OK
        )


@extend_schema(
    tags=['Authentication'],
    summary='Current user',
    description='Return the identity and stored role behind the presented token.',
    responses={200: UserSummarySerializer, 401: OpenApiTypes.OBJECT}
)
class MeView(APIView):
    """
    GET /api/auth/me

    Return the authenticated user's id, username and role.
    """

    def get(self, request):
        return Response(UserSummarySerializer(request.user).data)
