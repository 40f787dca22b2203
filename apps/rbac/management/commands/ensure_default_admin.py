"""
Management command to make sure an Admin account exists.

Usage:
    python manage.py ensure_default_admin
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from apps.rbac.bootstrap import ensure_default_admin


class Command(BaseCommand):
    help = 'Create or promote the default admin when no Admin exists'

    def handle(self, *args, **options):
        user, created = ensure_default_admin()

        if created:
            self.stdout.write(
                self.style.SUCCESS(f'✓ Created default admin: {user.username}')
            )
            if settings.DEFAULT_ADMIN_PASSWORD == 'admin123':
                self.stdout.write(
                    self.style.WARNING('⚠ Stock password in use. Change it after first login.')
                )
        else:
            self.stdout.write(f'Admin present: {user.username}')
