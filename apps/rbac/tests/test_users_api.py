"""
Tests for user management endpoints (Admin only).
"""
import uuid

import pytest
from rest_framework import status

from apps.rbac.models import User, Role


@pytest.mark.django_db
class TestUserList:
    """Test GET /api/users."""

    def test_admin_lists_users_without_hashes(self, admin_client, admin_user, accountant_user):
        response = admin_client.get('/api/users')

        assert response.status_code == status.HTTP_200_OK
        assert [u['username'] for u in response.data] == ['clerk', 'root']
        for item in response.data:
            assert 'password_hash' not in item
            assert 'password' not in item

    def test_accountant_forbidden(self, accountant_client):
        response = accountant_client.get('/api/users')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error']['details']['required_roles'] == ['Admin']


@pytest.mark.django_db
class TestUserDetail:
    """Test GET/PATCH/DELETE /api/users/{id}."""

    def test_get_user(self, admin_client, accountant_user):
        response = admin_client.get(f'/api/users/{accountant_user.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['username'] == 'clerk'

    def test_get_missing_user(self, admin_client):
        response = admin_client.get(f'/api/users/{uuid.uuid4()}')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error']['code'] == 'NOT_FOUND'

    def test_change_role(self, admin_client, accountant_user):
        response = admin_client.patch(
            f'/api/users/{accountant_user.id}', {'role': 'Admin'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == 'Admin'
        accountant_user.refresh_from_db()
        assert accountant_user.role == Role.ADMIN

    def test_change_password_rehashes(self, admin_client, api_client, accountant_user):
        response = admin_client.patch(
            f'/api/users/{accountant_user.id}', {'password': 'fresh-pass-1'}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK

        login = api_client.post('/api/auth/login', {
            'username': 'clerk', 'password': 'fresh-pass-1',
        }, format='json')
        assert login.status_code == status.HTTP_200_OK

        accountant_user.refresh_from_db()
        assert accountant_user.password_hash != 'fresh-pass-1'

    def test_rename_to_taken_username(self, admin_client, accountant_user):
        response = admin_client.patch(
            f'/api/users/{accountant_user.id}', {'username': 'root'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error']['code'] == 'DUPLICATE_USERNAME'

    def test_patch_rejects_unknown_fields(self, admin_client, accountant_user):
        response = admin_client.patch(
            f'/api/users/{accountant_user.id}',
            {'role': 'Admin', 'created_at': '2020-01-01T00:00:00Z'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'VALIDATION_ERROR'
        accountant_user.refresh_from_db()
        assert accountant_user.role == Role.ACCOUNTANT

    def test_empty_patch_rejected(self, admin_client, accountant_user):
        response = admin_client.patch(f'/api/users/{accountant_user.id}', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_user(self, admin_client, accountant_user):
        response = admin_client.delete(f'/api/users/{accountant_user.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'User deleted successfully'
        assert not User.objects.filter(id=accountant_user.id).exists()

    def test_delete_missing_user(self, admin_client):
        response = admin_client.delete(f'/api/users/{uuid.uuid4()}')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_accountant_cannot_delete(self, accountant_client, admin_user):
        response = accountant_client.delete(f'/api/users/{admin_user.id}')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert User.objects.filter(id=admin_user.id).exists()

    def test_admin_cannot_delete_last_admin(self, admin_client, admin_user):
        response = admin_client.delete(f'/api/users/{admin_user.id}')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error']['code'] == 'LAST_ADMIN'
        assert User.objects.filter(id=admin_user.id).exists()

    def test_update_rejects_short_password(self, admin_client, accountant_user):
        response = admin_client.patch(
            f'/api/users/{accountant_user.id}', {'password': 'abc'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data['error']['details']
        accountant_user.refresh_from_db()
        assert accountant_user.check_password('clerkpass123')
