"""
Tests for startup configuration validation.

Validates:
- JWT_SECRET_KEY presence and entropy
- Development defaults refused when DEBUG is off
"""
import pytest
from django.apps import apps
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings


STRONG_KEY = 'k8Vq3ZtR1wLp9Yx2Nc6Hm4Bs7Df0Gj5Ea'


@pytest.fixture
def core_config():
    return apps.get_app_config('core')


class TestJWTSecretKeyValidation:
    """Test JWT_SECRET_KEY validation requirements."""

    def test_missing_key_rejected(self, core_config):
        with override_settings(JWT_SECRET_KEY=''):
            with pytest.raises(ImproperlyConfigured, match='must be set'):
                core_config._validate_jwt_configuration()

    def test_low_entropy_key_rejected(self, core_config):
        with override_settings(JWT_SECRET_KEY='ab' * 20):
            with pytest.raises(ImproperlyConfigured, match='insufficient entropy'):
                core_config._validate_jwt_configuration()

    def test_dev_key_rejected_without_debug(self, core_config):
        with override_settings(DEBUG=False, JWT_SECRET_KEY=settings.DEV_JWT_SECRET_KEY):
            with pytest.raises(ImproperlyConfigured, match='development default'):
                core_config._validate_jwt_configuration()

    def test_dev_key_allowed_in_debug(self, core_config):
        with override_settings(DEBUG=True, JWT_SECRET_KEY=settings.DEV_JWT_SECRET_KEY):
            core_config._validate_jwt_configuration()

    def test_strong_key_accepted(self, core_config):
        with override_settings(DEBUG=False, JWT_SECRET_KEY=STRONG_KEY):
            core_config._validate_jwt_configuration()


class TestSecuritySettingsValidation:

    def test_dev_secret_key_rejected_without_debug(self, core_config):
        with override_settings(DEBUG=False, SECRET_KEY=settings.DEV_SECRET_KEY):
            with pytest.raises(ImproperlyConfigured, match='SECRET_KEY'):
                core_config._validate_security_settings()

    def test_debug_skips_checks(self, core_config):
        with override_settings(DEBUG=True, SECRET_KEY=settings.DEV_SECRET_KEY):
            core_config._validate_security_settings()
