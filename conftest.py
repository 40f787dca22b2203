"""
Pytest configuration and fixtures.
"""
import pytest
from django.conf import settings
import django


def pytest_configure(config):
    """Configure Django settings for tests."""
    settings.DATABASES['default'] = {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
        'ATOMIC_REQUESTS': False,
    }
    # Fast hashing; hashes are still salted and one-way
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.RATELIMIT_ENABLE = False
    settings.BOOTSTRAP_DEFAULT_ADMIN = False
    django.setup()


@pytest.fixture
def api_client():
    """Return DRF API client."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create a user with the Admin role."""
    from apps.rbac.models import User, Role
    return User.objects.create_user(username='root', password='rootpass123', role=Role.ADMIN)


@pytest.fixture
def accountant_user(db):
    """Create a user with the Accountant role."""
    from apps.rbac.models import User, Role
    return User.objects.create_user(username='clerk', password='clerkpass123', role=Role.ACCOUNTANT)


def authenticated_client(user):
    from rest_framework.test import APIClient
    from apps.rbac.services import TokenService

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {TokenService.issue(user)}')
    return client


@pytest.fixture
def admin_client(admin_user):
    """API client carrying an Admin token."""
    return authenticated_client(admin_user)


@pytest.fixture
def accountant_client(accountant_user):
    """API client carrying an Accountant token."""
    return authenticated_client(accountant_user)


@pytest.fixture
def cash_account(admin_user):
    """Account named Cash."""
    from apps.catalog.services import accounts
    return accounts.create({
        'name': 'Cash',
        'code': '1000',
        'account_type': 'Asset',
        'account_type_code': 'A',
        'sub_account': 'Current Assets',
        'sub_account_code': 'CA',
        'financial_statement': 'Balance Sheet',
    }, acting_user=admin_user)


@pytest.fixture
def supplies_account(admin_user):
    """Account named Office Supplies."""
    from apps.catalog.services import accounts
    return accounts.create({
        'name': 'Office Supplies',
        'code': '6100',
        'account_type': 'Expense',
        'account_type_code': 'E',
        'financial_statement': 'Income Statement',
    }, acting_user=admin_user)


@pytest.fixture
def alice(admin_user):
    """Employee Alice, Clerk, E01."""
    from apps.catalog.services import employees
    return employees.create({'name': 'Alice', 'title': 'Clerk', 'code': 'E01'}, acting_user=admin_user)
