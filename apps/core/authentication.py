"""
Custom DRF authentication classes.
"""
import logging
from rest_framework.authentication import BaseAuthentication, get_authorization_header

logger = logging.getLogger(__name__)


class JWTAuthentication(BaseAuthentication):
    """
    DRF authentication class for `Authorization: Bearer <token>` headers.

    For every request this:
    1. Extracts the bearer token (no header at all leaves the request
       anonymous, so the permission layer answers 401)
    2. Verifies signature and expiry via TokenService
    3. Re-resolves the user by the token's user_id, so deleted users and
       changed roles take effect immediately

    Stateless: no session, nothing cached between requests.
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        """
        Return (user, claims) for a valid bearer token.

        Returns:
            tuple: (user, TokenClaims) if authenticated, None if no header present

        Raises:
            Unauthenticated: malformed header, bad/expired token, or unknown user
        """
        from apps.core.exceptions import Unauthenticated, TokenExpired, TokenInvalid
        from apps.core.logging import SecurityLogger
        from apps.rbac.services import TokenService, UserService

        auth = get_authorization_header(request).split()

        if not auth:
            return None

        if auth[0].lower() != self.keyword.lower().encode() or len(auth) != 2:
            raise Unauthenticated(
                'Authorization header must be: Bearer <token>',
                details={'reason': 'token_invalid'}
            )

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise Unauthenticated('Invalid token', details={'reason': 'token_invalid'})

        try:
            claims = TokenService.verify(token)
        except TokenExpired:
            raise Unauthenticated('Token has expired', details={'reason': 'token_expired'})
        except TokenInvalid as e:
            SecurityLogger.log_invalid_token(
                ip_address=request.META.get('REMOTE_ADDR', 'unknown'),
                reason=e.message,
            )
            raise Unauthenticated('Invalid token', details={'reason': 'token_invalid'})

        user = UserService.get_user(claims.user_id)
        if user is None:
            logger.warning(
                "Token presented for a user that no longer exists",
                extra={'user_id': str(claims.user_id)}
            )
            raise Unauthenticated(
                'User no longer exists',
                details={'reason': 'user_not_found'}
            )

        return (user, claims)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
