from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
import logging

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'

    def ready(self):
        """
        Perform startup validation checks when Django initializes.

        This ensures critical security configurations are properly set
        before the application starts accepting requests.
        """
        import sys
        if 'runserver' not in sys.argv and 'gunicorn' not in sys.argv[0]:
            # Skip validation for management commands and tests
            return

        self._validate_jwt_configuration()
        self._validate_security_settings()

        logger.info("All startup security validations passed")

    def _validate_jwt_configuration(self):
        """Validate JWT secret key configuration."""
        jwt_secret = getattr(settings, 'JWT_SECRET_KEY', None)

        if not jwt_secret:
            raise ImproperlyConfigured(
                "JWT_SECRET_KEY must be set in environment variables. "
                "Generate a strong key with: "
                "python -c \"import secrets; print(secrets.token_urlsafe(32))\""
            )

        unique_chars = len(set(jwt_secret))
        if unique_chars < 16:
            raise ImproperlyConfigured(
                f"JWT_SECRET_KEY has insufficient entropy. "
                f"Found only {unique_chars} unique characters, need at least 16."
            )

        if not settings.DEBUG and jwt_secret == settings.DEV_JWT_SECRET_KEY:
            raise ImproperlyConfigured(
                "JWT_SECRET_KEY is the development default. "
                "Set JWT_SECRET_KEY in the environment before running with DEBUG=False."
            )

        logger.info("JWT configuration validated")

    def _validate_security_settings(self):
        """Validate general security settings."""
        if settings.DEBUG:
            return

        if settings.SECRET_KEY == settings.DEV_SECRET_KEY:
            raise ImproperlyConfigured(
                "SECRET_KEY is the development default. "
                "Generate with: "
                "python -c \"import secrets; print(secrets.token_urlsafe(50))\""
            )

        if settings.DEFAULT_ADMIN_PASSWORD == 'admin123':
            logger.warning(
                "DEFAULT_ADMIN_PASSWORD is the stock value. "
                "Change the default admin password after first login."
            )

        logger.info("Security settings validated")
