"""
Identity models.

Implements:
- User: username/password identity carrying exactly one Role
- Role: the two roles the service knows about
"""
import logging
from django.db import models
from django.contrib.auth.hashers import make_password, check_password
from apps.core.models import BaseModel

logger = logging.getLogger(__name__)


class Role(models.TextChoices):
    ADMIN = 'Admin', 'Admin'
    ACCOUNTANT = 'Accountant', 'Accountant'


class UserManager(models.Manager):
    """
    Manager for User queries.

    Compatible with Django's authentication system.
    """

    def admins(self):
        """Return users holding the Admin role."""
        return self.filter(role=Role.ADMIN)

    def by_username(self, username):
        """Find user by username."""
        return self.filter(username=username).first()

    def create_user(self, username, password=None, role=Role.ACCOUNTANT, **extra_fields):
        """
        Create a new user with hashed password.
        """
        if not username:
            raise ValueError('Username is required')

        user = self.model(username=username, role=role, **extra_fields)
        if password:
            user.set_password(password)
        user.save(using=self._db)
        return user

    def get_by_natural_key(self, username):
        return self.get(**{self.model.USERNAME_FIELD: username})


class User(BaseModel):
    """
    User identity for the record keeper.

    Authentication is by username/password; authorization is by role alone.
    The raw password is never stored: password_hash holds Django's salted
    PBKDF2 hash.

    This is the AUTH_USER_MODEL for the entire application.
    """

    username = models.CharField(
        max_length=150,
        unique=True,
        help_text="Login name (unique)"
    )
    password_hash = models.CharField(
        max_length=255,
        help_text="Hashed password",
        db_column='password_hash'
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.ACCOUNTANT,
        db_index=True,
        help_text="Admin or Accountant"
    )

    # Activity Tracking
    last_login_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Last login timestamp"
    )

    # Django auth compatibility
    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = ['role']

    objects = UserManager()

    class Meta:
        db_table = 'users'
        ordering = ['username']

    def __str__(self):
        return self.username

    def check_password(self, raw_password):
        """Check if provided password matches stored hash."""
        return check_password(raw_password, self.password_hash)

    def set_password(self, raw_password):
        """Set user password (hashes automatically)."""
        self.password_hash = make_password(raw_password)

    def get_username(self):
        return self.username

    def update_last_login(self):
        """Update last_login_at to current time."""
        from django.utils import timezone
        self.last_login_at = timezone.now()
        self.save(update_fields=['last_login_at'])

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    @property
    def is_active(self):
        """Users have no disabled state; deletion is the only way to revoke access."""
        return True

    @property
    def is_authenticated(self):
        """
        Always return True for User instances.
        This is required for Django authentication compatibility.
        """
        return True

    @property
    def is_anonymous(self):
        """
        Always return False for User instances.
        This is required for Django authentication compatibility.
        """
        return False

    def natural_key(self):
        return (self.username,)
