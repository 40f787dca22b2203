"""
DRF permission classes and decorators for role enforcement.

This module provides:
- HasRole: DRF permission class that requires an authenticated user and,
  when the view declares required_roles, one of those roles
- @requires_roles: Decorator to declare required roles on views
"""
import logging
from functools import wraps
from rest_framework.permissions import BasePermission

logger = logging.getLogger(__name__)


class HasRole(BasePermission):
    """
    DRF permission class that enforces role requirements on API endpoints.

    This permission class:
    1. Denies anonymous requests (DRF answers 401 because an authenticator is configured)
    2. Reads required_roles from the view; no roles declared means any authenticated user
    3. Raises Forbidden (403) when the user's stored role is not in required_roles

    Usage in views:
        class MyView(APIView):
            permission_classes = [HasRole]
            required_roles = {'Admin'}

    Or with per-method roles:
        class MyView(APIView):
            def check_permissions(self, request):
                self.required_roles = {'Admin'} if request.method != 'GET' else None
                super().check_permissions(request)
    """

    def has_permission(self, request, view):
        """
        Check if the authenticated user's role satisfies the view.

        Args:
            request: DRF request object
            view: DRF view instance with optional required_roles attribute

        Returns:
            bool: False for anonymous users, True when the role is allowed

        Raises:
            Forbidden: authenticated but role not allowed
        """
        from apps.core.exceptions import Forbidden

        user = getattr(request, 'user', None)

        if not user or not user.is_authenticated:
            return False

        required_roles = getattr(view, 'required_roles', None)

        # If no roles required, any authenticated user passes
        if not required_roles:
            return True

        if isinstance(required_roles, str):
            required_roles = {required_roles}
        else:
            required_roles = set(required_roles)

        if user.role not in required_roles:
            from apps.core.logging import SecurityLogger

            SecurityLogger.log_permission_denied(
                user=user,
                required_roles=required_roles,
                ip_address=request.META.get('REMOTE_ADDR', 'unknown'),
            )

            logger.warning(
                f"Permission denied: User {user.username} with role {user.role} needs one of {sorted(required_roles)}",
                extra={
                    'user_id': str(user.id),
                    'required_roles': sorted(required_roles),
                    'view': view.__class__.__name__,
                    'method': request.method,
                    'path': request.path,
                    'request_id': getattr(request, 'request_id', None),
                }
            )

            raise Forbidden(
                'Insufficient permissions',
                details={'required_roles': sorted(required_roles)}
            )

        logger.debug(
            f"Permission granted: role {user.role} in {sorted(required_roles)}",
            extra={'view': view.__class__.__name__}
        )

        return True


def requires_roles(*roles):
    """
    Decorator to declare required roles on view classes or methods.

    Usage:
        @requires_roles('Admin')
        class UserListView(APIView):
            pass

    Or on individual methods:
        class RecordDetailView(APIView):
            @requires_roles('Admin')
            def delete(self, request, record_id):
                pass

    On a method the roles are set on the view instance before the handler
    runs, so the check is made by calling check_permissions again.
    """
    def decorator(view_or_method):
        if isinstance(view_or_method, type):
            view_or_method.required_roles = set(roles)
            return view_or_method

        @wraps(view_or_method)
        def wrapped(self, request, *args, **kwargs):
            self.required_roles = set(roles)
            self.check_permissions(request)
            return view_or_method(self, request, *args, **kwargs)

        wrapped.required_roles = set(roles)
        return wrapped

    return decorator
