"""
RBAC signals.

Runs the default-admin bootstrap after migrations, which is the first
moment the users table is guaranteed to exist on a fresh database.
"""
from django.conf import settings
from django.db.models.signals import post_migrate
from django.dispatch import receiver


@receiver(post_migrate, dispatch_uid='rbac.bootstrap_default_admin')
def bootstrap_default_admin(sender, app_config=None, **kwargs):
    """
    Create or promote the default admin once the rbac app has migrated.

    Disabled with BOOTSTRAP_DEFAULT_ADMIN=False (tests do this).
    """
    if app_config is None or app_config.label != 'rbac':
        return

    if not getattr(settings, 'BOOTSTRAP_DEFAULT_ADMIN', True):
        return

    # Import here to avoid circular imports
    from apps.rbac.bootstrap import ensure_default_admin

    ensure_default_admin()
