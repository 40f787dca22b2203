"""
Core API views.
"""
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from django.db import connection
from django.utils import timezone
from drf_spectacular.utils import extend_schema
import logging

logger = logging.getLogger(__name__)

SERVICE_NAME = 'Ledger Keeper API'
SERVICE_VERSION = '1.0.0'


class ServiceIndexView(APIView):
    """
    GET /

    Service name, version and a map of the main endpoints.
    """
    authentication_classes = []
    permission_classes = []

    @extend_schema(exclude=True)
    def get(self, request):
        return Response({
            'message': SERVICE_NAME,
            'status': 'running',
            'version': SERVICE_VERSION,
            'endpoints': {
                'health': '/health',
                'auth': {
                    'login': 'POST /api/auth/login',
                    'logout': 'POST /api/auth/logout',
                    'register': 'POST /api/auth/register',
                    'me': 'GET /api/auth/me',
                },
                'catalogs': ['/api/accounts', '/api/employees', '/api/projects'],
                'records': {
                    'list': 'GET /api/records',
                    'create': 'POST /api/records',
                    'update': 'PATCH /api/records/:id',
                    'delete': 'DELETE /api/records/:id',
                },
                'users': '/api/users',
                'schema': '/api/schema/swagger/',
            },
        })


class HealthCheckView(APIView):
    """
    Health check endpoint to verify the store is reachable.

    GET /health

    Returns 200 if the database answers, 503 otherwise.
    """
    authentication_classes = []
    permission_classes = []

    @extend_schema(
        summary="Health check",
        description="Check that the service and its database are up",
        responses={
            200: {
                'type': 'object',
                'properties': {
                    'status': {'type': 'string'},
                    'database': {'type': 'string'},
                    'timestamp': {'type': 'string'},
                }
            },
        }
    )
    def get(self, request):
        """Check health of the database."""
        health_status = {
            'status': 'ok',
            'database': 'unknown',
            'timestamp': timezone.now().isoformat(),
        }

        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            health_status['database'] = 'healthy'
        except Exception as e:
            logger.error("Database health check failed", exc_info=True)
            health_status['status'] = 'unhealthy'
            health_status['database'] = 'unhealthy'
            health_status['errors'] = [f"Database: {e.__class__.__name__}"]
            return Response(health_status, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(health_status, status=status.HTTP_200_OK)
