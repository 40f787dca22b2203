"""
Default-admin bootstrapping.

Guarantees that at least one Admin exists so a fresh installation can be
administered.
"""
import logging

from django.conf import settings
from django.db import transaction

from apps.rbac.models import User, Role

logger = logging.getLogger(__name__)


def ensure_default_admin():
    """
    Ensure at least one Admin account exists.

    - Any Admin present: nothing happens.
    - No Admin, but a user named DEFAULT_ADMIN_USERNAME exists: that user is
      promoted to Admin and keeps its password.
    - Otherwise the default admin is created with DEFAULT_ADMIN_PASSWORD.

    Returns:
        tuple: (admin user, created)
    """
    from apps.core.logging import SecurityLogger

    existing_admin = User.objects.admins().order_by('created_at').first()
    if existing_admin is not None:
        return existing_admin, False

    username = settings.DEFAULT_ADMIN_USERNAME
    password = settings.DEFAULT_ADMIN_PASSWORD

    with transaction.atomic():
        user = User.objects.by_username(username)

        if user is not None:
            user.role = Role.ADMIN
            user.save(update_fields=['role', 'updated_at'])
            logger.warning(
                f"No Admin found; promoted existing user '{username}' to Admin",
                extra={'user_id': str(user.id)}
            )
            return user, False

        user = User.objects.create_user(username=username, password=password, role=Role.ADMIN)

    stock_password = password == 'admin123'
    SecurityLogger.log_default_admin_created(username=username, stock_password=stock_password)

    if stock_password:
        logger.warning(
            f"Default admin '{username}' created with the stock password. Change it after first login."
        )
    else:
        logger.info(f"Default admin '{username}' created", extra={'user_id': str(user.id)})

    return user, True
