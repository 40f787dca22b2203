"""
Tests for TokenService, UserService and AuthService.
"""
import uuid
from datetime import timedelta

import jwt
import pytest
from unittest.mock import patch
from django.conf import settings
from django.utils import timezone

from apps.core.exceptions import (
    DuplicateUsername, InvalidCredentials, LastAdmin, NotFound,
    TokenExpired, TokenInvalid, ValidationError,
)
from apps.rbac.models import User, Role
from apps.rbac.services import TokenService, UserService, AuthService


def encode(payload, key=None):
    return jwt.encode(payload, key or settings.JWT_SECRET_KEY, algorithm='HS256')


@pytest.mark.django_db
class TestTokenService:
    """Test token issue and verification."""

    def test_issue_then_verify_returns_same_identity(self, accountant_user):
        token = TokenService.issue(accountant_user)

        claims = TokenService.verify(token)

        assert claims.user_id == accountant_user.id
        assert claims.username == 'clerk'
        assert claims.role == Role.ACCOUNTANT

    def test_token_lifetime_is_24_hours(self, accountant_user):
        claims = TokenService.verify(TokenService.issue(accountant_user))

        assert claims.expires_at - claims.issued_at == timedelta(hours=24)

    def test_token_past_expiry_raises_expired(self, accountant_user):
        issued_at = timezone.now() - timedelta(hours=25)
        token = TokenService.issue(accountant_user, issued_at=issued_at)

        with pytest.raises(TokenExpired):
            TokenService.verify(token)

    def test_token_just_inside_expiry_is_valid(self, accountant_user):
        issued_at = timezone.now() - timedelta(hours=23, minutes=59)
        token = TokenService.issue(accountant_user, issued_at=issued_at)

        assert TokenService.verify(token).user_id == accountant_user.id

    def test_token_signed_with_other_key_is_invalid(self, accountant_user):
        now = timezone.now()
        token = encode({
            'user_id': str(accountant_user.id),
            'username': accountant_user.username,
            'role': 'Admin',
            'iat': now,
            'exp': now + timedelta(hours=1),
        }, key='another-signing-key-that-is-long-enough-123')

        with pytest.raises(TokenInvalid):
            TokenService.verify(token)

    def test_tampered_payload_is_invalid(self, accountant_user):
        token = TokenService.issue(accountant_user)
        header, _, signature = token.split('.')
        now = timezone.now()
        forged_payload = encode({
            'user_id': str(accountant_user.id),
            'username': accountant_user.username,
            'role': 'Admin',
            'iat': now,
            'exp': now + timedelta(hours=1),
        }).split('.')[1]

        with pytest.raises(TokenInvalid):
            TokenService.verify(f'{header}.{forged_payload}.{signature}')

    def test_garbage_is_invalid(self):
        with pytest.raises(TokenInvalid):
            TokenService.verify('not-a-token')

    def test_missing_role_claim_is_invalid(self, accountant_user):
        now = timezone.now()
        token = encode({
            'user_id': str(accountant_user.id),
            'username': accountant_user.username,
            'iat': now,
            'exp': now + timedelta(hours=1),
        })

        with pytest.raises(TokenInvalid):
            TokenService.verify(token)

    def test_unknown_role_claim_is_invalid(self, accountant_user):
        now = timezone.now()
        token = encode({
            'user_id': str(accountant_user.id),
            'username': accountant_user.username,
            'role': 'Auditor',
            'iat': now,
            'exp': now + timedelta(hours=1),
        })

        with pytest.raises(TokenInvalid):
            TokenService.verify(token)

    def test_malformed_user_id_is_invalid(self):
        now = timezone.now()
        token = encode({
            'user_id': 'user-1',
            'username': 'someone',
            'role': 'Admin',
            'iat': now,
            'exp': now + timedelta(hours=1),
        })

        with pytest.raises(TokenInvalid):
            TokenService.verify(token)


@pytest.mark.django_db
class TestUserService:
    """Test the credential store."""

    def test_create_user_hashes_password(self):
        user = UserService.create_user('jdoe', 'Secret123!', Role.ACCOUNTANT)

        assert user.password_hash != 'Secret123!'
        assert user.check_password('Secret123!')
        assert user.role == Role.ACCOUNTANT

    def test_create_duplicate_username_raises(self, accountant_user):
        with pytest.raises(DuplicateUsername):
            UserService.create_user('clerk', 'whatever', Role.ADMIN)

        assert User.objects.filter(username='clerk').count() == 1

    def test_create_with_unknown_role_raises(self):
        with pytest.raises(ValidationError):
            UserService.create_user('jdoe', 'Secret123!', 'Auditor')

    def test_verify_credentials_success(self, accountant_user):
        assert UserService.verify_credentials('clerk', 'clerkpass123') == accountant_user

    def test_wrong_password_and_unknown_user_are_indistinguishable(self, accountant_user):
        with pytest.raises(InvalidCredentials) as wrong_password:
            UserService.verify_credentials('clerk', 'nope')

        with pytest.raises(InvalidCredentials) as unknown_user:
            UserService.verify_credentials('ghost', 'nope')

        assert wrong_password.value.message == unknown_user.value.message
        assert wrong_password.value.details == unknown_user.value.details

    def test_update_role_and_password(self, accountant_user):
        user = UserService.update_user(accountant_user.id, role=Role.ADMIN, password='newpass456')

        user.refresh_from_db()
        assert user.role == Role.ADMIN
        assert user.check_password('newpass456')
        assert not user.check_password('clerkpass123')

    def test_update_username_to_taken_name_raises(self, accountant_user, admin_user):
        with pytest.raises(DuplicateUsername):
            UserService.update_user(accountant_user.id, username='root')

    def test_update_keeping_own_username_is_allowed(self, accountant_user):
        user = UserService.update_user(accountant_user.id, username='clerk')
        assert user.username == 'clerk'

    def test_update_rejects_unknown_fields(self, accountant_user):
        with pytest.raises(ValidationError) as exc_info:
            UserService.update_user(accountant_user.id, password_hash='x')

        assert 'password_hash' in exc_info.value.details

    def test_update_missing_user_raises_not_found(self):
        with pytest.raises(NotFound):
            UserService.update_user(uuid.uuid4(), role=Role.ADMIN)

    def test_delete_user(self, accountant_user):
        UserService.delete_user(accountant_user.id)

        assert UserService.get_user(accountant_user.id) is None

    def test_delete_missing_user_raises_not_found(self):
        with pytest.raises(NotFound):
            UserService.delete_user(uuid.uuid4())

    def test_update_writes_only_supplied_columns(self, accountant_user):
        stale = User.objects.get(id=accountant_user.id)
        UserService.update_user(accountant_user.id, username='bookkeeper')

        with patch.object(UserService, 'get_user', return_value=stale):
            UserService.update_user(accountant_user.id, role=Role.ADMIN)

        user = User.objects.get(id=accountant_user.id)
        assert user.username == 'bookkeeper'
        assert user.role == Role.ADMIN

    def test_delete_last_admin_refused(self, admin_user):
        with pytest.raises(LastAdmin):
            UserService.delete_user(admin_user.id)

        assert User.objects.filter(id=admin_user.id).exists()

    def test_demote_last_admin_refused(self, admin_user):
        with pytest.raises(LastAdmin):
            UserService.update_user(admin_user.id, role=Role.ACCOUNTANT)

        admin_user.refresh_from_db()
        assert admin_user.role == Role.ADMIN

    def test_admin_removable_when_another_remains(self, admin_user, accountant_user):
        UserService.update_user(accountant_user.id, role=Role.ADMIN)

        UserService.update_user(admin_user.id, role=Role.ACCOUNTANT)
        UserService.delete_user(admin_user.id)

        assert list(User.objects.admins()) == [User.objects.get(id=accountant_user.id)]

    def test_list_users_ordered_by_username(self, admin_user, accountant_user):
        UserService.create_user('alpha', 'pw', Role.ACCOUNTANT)

        assert [u.username for u in UserService.list_users()] == ['alpha', 'clerk', 'root']


@pytest.mark.django_db
class TestAuthService:
    """Test login flow."""

    def test_login_returns_token_for_user(self, accountant_user):
        result = AuthService.login('clerk', 'clerkpass123')

        assert result['user'] == accountant_user
        assert TokenService.verify(result['token']).user_id == accountant_user.id

    def test_login_updates_last_login(self, accountant_user):
        assert accountant_user.last_login_at is None

        AuthService.login('clerk', 'clerkpass123')

        accountant_user.refresh_from_db()
        assert accountant_user.last_login_at is not None

    def test_login_as_another_user_yields_independent_token(self, accountant_user, admin_user):
        first = AuthService.login('clerk', 'clerkpass123')['token']
        second = AuthService.login('root', 'rootpass123')['token']

        assert TokenService.verify(first).role == Role.ACCOUNTANT
        assert TokenService.verify(second).role == Role.ADMIN

    def test_login_with_bad_password_raises(self, accountant_user):
        with pytest.raises(InvalidCredentials):
            AuthService.login('clerk', 'wrong')
