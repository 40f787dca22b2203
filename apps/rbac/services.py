"""
Identity and authentication services.

Implements:
- TokenService: signed, time-limited session tokens (JWT)
- UserService: the credential store (create, verify, update, delete, list)
- AuthService: login and admin-driven registration built on the two above
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Optional, Dict, Any

import jwt
from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.core.exceptions import (
    DuplicateUsername, InvalidCredentials, LastAdmin, NotFound,
    TokenExpired, TokenInvalid, ValidationError,
)
from apps.rbac.models import User, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Identity and role carried by a verified session token."""
    user_id: uuid.UUID
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """
    Issues and verifies stateless session tokens.

    Tokens are HS256 JWTs with claims user_id, username, role, iat and exp.
    There is no revocation list: a token stays valid until exp.
    """

    REQUIRED_CLAIMS = ['user_id', 'username', 'role', 'iat', 'exp']

    @classmethod
    def lifetime(cls) -> timedelta:
        return timedelta(hours=getattr(settings, 'JWT_EXPIRATION_HOURS', 24))

    @classmethod
    def issue(cls, user: User, issued_at: Optional[datetime] = None) -> str:
        """
        Issue a JWT for a user.

        Args:
            user: User instance
            issued_at: Issue time (defaults to now)

        Returns:
            JWT token string
        """
        issued_at = issued_at or timezone.now()
        payload = {
            'user_id': str(user.id),
            'username': user.username,
            'role': user.role,
            'iat': issued_at,
            'exp': issued_at + cls.lifetime(),
        }

        return jwt.encode(
            payload,
            settings.JWT_SECRET_KEY,
            algorithm=getattr(settings, 'JWT_ALGORITHM', 'HS256')
        )

    @classmethod
    def verify(cls, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the token's claims.

        Raises:
            TokenExpired: token is past exp
            TokenInvalid: bad signature, malformed token or bad claims
        """
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[getattr(settings, 'JWT_ALGORITHM', 'HS256')],
                options={'require': cls.REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired('Token has expired')
        except jwt.InvalidTokenError as e:
            raise TokenInvalid(str(e) or 'Invalid token')

        try:
            user_id = uuid.UUID(payload['user_id'])
        except (ValueError, TypeError, AttributeError):
            raise TokenInvalid('Token user_id is not a valid id')

        if payload['role'] not in Role.values:
            raise TokenInvalid(f"Token role '{payload['role']}' is not a known role")

        return TokenClaims(
            user_id=user_id,
            username=payload['username'],
            role=payload['role'],
            issued_at=datetime.fromtimestamp(payload['iat'], tz=dt_timezone.utc),
            expires_at=datetime.fromtimestamp(payload['exp'], tz=dt_timezone.utc),
        )


class UserService:
    """
    Credential store operations.

    Uniqueness of usernames is enforced by the unique index; a lost race
    surfaces as IntegrityError and is reported as DuplicateUsername.
    """

    UPDATABLE_FIELDS = {'username', 'password', 'role'}

    @staticmethod
    def _validate_role(role):
        if role not in Role.values:
            raise ValidationError(
                f"Role must be one of: {', '.join(Role.values)}",
                details={'role': [f"'{role}' is not a valid role."]}
            )

    @classmethod
    def create_user(cls, username: str, raw_password: str, role: str) -> User:
        """
        Create a user with a salted one-way password hash.

        Raises:
            DuplicateUsername: username already taken
            ValidationError: unknown role
        """
        cls._validate_role(role)

        if User.objects.filter(username=username).exists():
            raise DuplicateUsername(f"Username '{username}' already exists")

        try:
            with transaction.atomic():
                user = User.objects.create_user(username=username, password=raw_password, role=role)
        except IntegrityError:
            raise DuplicateUsername(f"Username '{username}' already exists")

        logger.info(
            f"User created: {user.username}",
            extra={'user_id': str(user.id), 'role': user.role}
        )
        return user

    @classmethod
    def verify_credentials(cls, username: str, raw_password: str) -> User:
        """
        Return the user for a matching username/password pair.

        Raises:
            InvalidCredentials: unknown user or wrong password (not distinguished)
        """
        user = User.objects.by_username(username)

        if user is None:
            # Run the password hasher once to reduce timing
            # difference between existing and non-existing users
            make_password(raw_password)
            raise InvalidCredentials('Invalid credentials')

        if not user.check_password(raw_password):
            raise InvalidCredentials('Invalid credentials')

        return user

    @staticmethod
    def get_user(user_id) -> Optional[User]:
        return User.objects.filter(id=user_id).first()

    @staticmethod
    def list_users():
        """All users ordered by username. Serializers never expose password_hash."""
        return User.objects.order_by('username')

    @classmethod
    def update_user(cls, user_id, **fields) -> User:
        """
        Update username, password and/or role.

        Only the supplied columns are written.

        Raises:
            NotFound: no such user
            DuplicateUsername: new username taken by another user
            LastAdmin: demoting the only Admin
            ValidationError: unknown field or role
        """
        unknown = set(fields) - cls.UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                'Unknown fields',
                details={name: ['This field is not allowed.'] for name in sorted(unknown)}
            )

        user = cls.get_user(user_id)
        if user is None:
            raise NotFound('User not found')

        update_fields = {'updated_at'}

        if 'role' in fields:
            cls._validate_role(fields['role'])
            user.role = fields['role']
            update_fields.add('role')

        if 'username' in fields and fields['username'] != user.username:
            if User.objects.filter(username=fields['username']).exclude(id=user.id).exists():
                raise DuplicateUsername(f"Username '{fields['username']}' already exists")
            user.username = fields['username']
            update_fields.add('username')

        if 'password' in fields:
            user.set_password(fields['password'])
            update_fields.add('password_hash')

        try:
            with transaction.atomic():
                if user.role != Role.ADMIN:
                    cls._ensure_other_admin(user)
                user.save(update_fields=sorted(update_fields))
        except IntegrityError:
            raise DuplicateUsername(f"Username '{user.username}' already exists")

        user.refresh_from_db()
        logger.info(
            f"User updated: {user.username}",
            extra={'user_id': str(user.id), 'fields': sorted(fields)}
        )
        return user

    @classmethod
    def delete_user(cls, user_id) -> None:
        """
        Hard delete a user.

        Records keep the deleted user's id in created_by/last_modified_by.

        Raises:
            NotFound: no such user
            LastAdmin: deleting the only Admin
        """
        user = cls.get_user(user_id)
        if user is None:
            raise NotFound('User not found')

        username = user.username
        with transaction.atomic():
            cls._ensure_other_admin(user)
            user.delete()

        logger.info(f"User deleted: {username}", extra={'user_id': str(user_id)})

    @staticmethod
    def _ensure_other_admin(user):
        # At least one Admin must remain
        admin_ids = list(User.objects.admins().select_for_update().values_list('id', flat=True))
        if admin_ids == [user.id]:
            raise LastAdmin('Cannot remove the last Admin')


class AuthService:
    """
    Service for authentication flows: login and registration.
    """

    @classmethod
    def login(cls, username: str, password: str) -> Dict[str, Any]:
        """
        Authenticate user and return a fresh token.

        Logging in again while holding a token (e.g. switching user) simply
        yields an independent token for the new identity.

        Returns:
            Dict with user and token

        Raises:
            InvalidCredentials: on any mismatch
        """
        user = UserService.verify_credentials(username, password)
        user.update_last_login()

        token = TokenService.issue(user)

        logger.info(
            f"User logged in: {user.username}",
            extra={'user_id': str(user.id)}
        )

        return {
            'user': user,
            'token': token,
        }

    @classmethod
    def register_user(cls, username: str, password: str, role: str, registered_by: User) -> User:
        """
        Create a user on behalf of an Admin.

        Raises:
            DuplicateUsername: username already taken
        """
        user = UserService.create_user(username, password, role)

        logger.info(
            f"User registered: {user.username} by {registered_by.username}",
            extra={'user_id': str(user.id), 'registered_by': str(registered_by.id)}
        )

        return user
