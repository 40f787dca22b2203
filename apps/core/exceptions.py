"""
Domain exceptions and the DRF exception handler.

Every failure leaves the API in the same envelope:

    {"error": {"code": "...", "message": "...", "details": {...}}, "request_id": "..."}
"""
import logging
from rest_framework.response import Response
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from django.http import Http404, JsonResponse

logger = logging.getLogger(__name__)


class LedgerException(Exception):
    """Base exception for Ledger Keeper errors."""

    code = 'ERROR'
    status_code = 400

    def __init__(self, message, details=None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class Unauthenticated(LedgerException):
    """Missing, invalid or expired token, or the token's user no longer exists."""
    code = 'UNAUTHENTICATED'
    status_code = 401


class TokenInvalid(LedgerException):
    """Raised when a token is malformed, badly signed or carries bad claims."""
    code = 'TOKEN_INVALID'
    status_code = 401


class TokenExpired(LedgerException):
    """Raised when a token is past its expiry."""
    code = 'TOKEN_EXPIRED'
    status_code = 401


class Forbidden(LedgerException):
    """Raised when a valid identity lacks the required role."""
    code = 'FORBIDDEN'
    status_code = 403


class InvalidCredentials(LedgerException):
    """Login failure. Unknown user and wrong password are indistinguishable."""
    code = 'INVALID_CREDENTIALS'
    status_code = 401


class DuplicateUsername(LedgerException):
    code = 'DUPLICATE_USERNAME'
    status_code = 409


class DuplicateName(LedgerException):
    code = 'DUPLICATE_NAME'
    status_code = 409


class LastAdmin(LedgerException):
    """Deleting or demoting the user would leave no Admin."""
    code = 'LAST_ADMIN'
    status_code = 409


class NotFound(LedgerException):
    code = 'NOT_FOUND'
    status_code = 404


class InvalidReference(LedgerException):
    """A record references an account or employee that is not in its catalog."""
    code = 'INVALID_REFERENCE'
    status_code = 400


class ValidationError(LedgerException):
    """Raised when input validation fails."""
    code = 'VALIDATION_ERROR'
    status_code = 400


# DRF exceptions that are caller errors, mapped to stable codes
DRF_ERROR_CODES = {
    drf_exceptions.NotAuthenticated: 'UNAUTHENTICATED',
    drf_exceptions.AuthenticationFailed: 'UNAUTHENTICATED',
    drf_exceptions.PermissionDenied: 'FORBIDDEN',
    drf_exceptions.NotFound: 'NOT_FOUND',
    drf_exceptions.ValidationError: 'VALIDATION_ERROR',
    drf_exceptions.ParseError: 'VALIDATION_ERROR',
    drf_exceptions.MethodNotAllowed: 'METHOD_NOT_ALLOWED',
    drf_exceptions.UnsupportedMediaType: 'UNSUPPORTED_MEDIA_TYPE',
    drf_exceptions.Throttled: 'RATE_LIMIT_EXCEEDED',
}


def error_payload(code, message, details=None, request_id=None):
    """Build the standard error envelope."""
    error_data = {
        'error': {
            'code': code,
            'message': message,
        }
    }

    if details:
        error_data['error']['details'] = details

    if request_id:
        error_data['request_id'] = request_id

    return error_data


def ratelimit_view(request, exception):
    """
    Custom view for django-ratelimit to return 429 instead of 403.

    This is called when rate limit is exceeded with block=True.
    """
    from apps.core.logging import SecurityLogger

    ip_address = request.META.get('REMOTE_ADDR', 'unknown')
    retry_after = 60

    SecurityLogger.log_rate_limit_exceeded(
        endpoint=request.path,
        ip_address=ip_address,
        limit='Rate limit exceeded'
    )

    response = JsonResponse(
        error_payload(
            'RATE_LIMIT_EXCEEDED',
            'Rate limit exceeded. Please try again later.',
            details={'retry_after': retry_after},
            request_id=getattr(request, 'request_id', None),
        ),
        status=429
    )

    # Add Retry-After header (RFC 6585)
    response['Retry-After'] = str(retry_after)

    return response


def custom_exception_handler(exc, context):
    """
    Exception handler that logs errors and returns the standard envelope.
    """
    # rest_framework.views loads the authentication and permission classes at import
    from rest_framework.views import exception_handler

    request = context.get('request')
    request_id = getattr(request, 'request_id', None) if request else None

    if isinstance(exc, LedgerException):
        logger.info(
            f"Request failed: {exc.code}",
            extra={
                'error_code': exc.code,
                'request_id': request_id,
                'path': request.path if request else None,
                'method': request.method if request else None,
            }
        )
        return Response(
            error_payload(exc.code, exc.message, exc.details, request_id),
            status=exc.status_code
        )

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound()

    # Call DRF's default exception handler first
    response = exception_handler(exc, context)

    # If DRF didn't handle it, return a generic 500 error
    if response is None:
        logger.error(
            f"API Exception: {exc.__class__.__name__}",
            extra={
                'exception': str(exc),
                'request_id': request_id,
                'path': request.path if request else None,
                'method': request.method if request else None,
            },
            exc_info=exc
        )
        return Response(
            error_payload('INTERNAL_ERROR', 'An unexpected error occurred', request_id=request_id),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    code = next(
        (code for exc_class, code in DRF_ERROR_CODES.items() if isinstance(exc, exc_class)),
        'ERROR'
    )

    if isinstance(exc, drf_exceptions.ValidationError):
        message = 'Invalid request data'
        details = exc.detail if isinstance(exc.detail, dict) else {'non_field_errors': exc.detail}
    else:
        message = str(exc.detail)
        details = None

    response.data = error_payload(code, message, details, request_id)
    return response
