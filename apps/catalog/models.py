"""
Catalog models for the admin-controlled lookup lists.

Implements:
- Account: chart-of-accounts entry referenced by records as source/target
- Employee: staff member referenced by records
- Project: project under construction

Names are unique within each catalog and are the keys records use to
reference entries. Records copy the fields listed in SNAPSHOT_FIELDS at
write time, so later edits or deletes here never change past records.
"""
from django.db import models
from apps.core.models import BaseModel


class LookupQuerySet(models.QuerySet):
    """QuerySet for lookup entries with chainable methods."""

    def named(self, name):
        """Entries with an exact name match."""
        return self.filter(name=name)


class LookupManager(models.Manager):
    """Manager for lookup entries."""

    def get_queryset(self):
        return LookupQuerySet(self.model, using=self._db)

    def by_name(self, name):
        """Find entry by its unique name."""
        return self.get_queryset().named(name).first()


class LookupEntity(BaseModel):
    """
    Abstract base for every catalog entry.

    Subclasses declare:
    - EDITABLE_FIELDS: fields accepted from callers on create/update
    - UNIQUE_FIELDS: fields checked for duplicates (always includes name)
    - SNAPSHOT_FIELDS: fields frozen into records that reference the entry
    """

    EDITABLE_FIELDS = ('name',)
    UNIQUE_FIELDS = ('name',)
    SNAPSHOT_FIELDS = ('name',)

    name = models.CharField(
        max_length=255,
        unique=True,
        help_text="Unique display name, used as the reference key"
    )

    # Plain id rather than a foreign key so deleting the user leaves it intact
    created_by = models.UUIDField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Id of the user who created the entry"
    )

    objects = LookupManager()

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name

    def snapshot(self):
        """Current values of SNAPSHOT_FIELDS as a plain dict."""
        return {field: getattr(self, field) for field in self.SNAPSHOT_FIELDS}


class Account(LookupEntity):
    """
    Chart-of-accounts entry.

    A record's source and target both reference accounts by name.
    """

    EDITABLE_FIELDS = (
        'name', 'code', 'account_type', 'account_type_code',
        'sub_account', 'sub_account_code', 'financial_statement',
    )
    UNIQUE_FIELDS = ('name',)
    SNAPSHOT_FIELDS = EDITABLE_FIELDS

    code = models.CharField(max_length=50, help_text="Account code")
    account_type = models.CharField(max_length=100, help_text="Account type, e.g. Asset")
    account_type_code = models.CharField(max_length=50, help_text="Account type code")
    sub_account = models.CharField(max_length=100, blank=True, default='')
    sub_account_code = models.CharField(max_length=50, blank=True, default='')
    financial_statement = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text="Statement the account reports on, e.g. Balance Sheet"
    )

    class Meta:
        db_table = 'accounts'
        ordering = ['name']


class Employee(LookupEntity):
    """Staff member that records are attributed to."""

    EDITABLE_FIELDS = ('name', 'title', 'code')
    UNIQUE_FIELDS = ('name', 'code')
    SNAPSHOT_FIELDS = ('name', 'title', 'code')

    title = models.CharField(max_length=100, help_text="Job title")
    code = models.CharField(max_length=50, unique=True, help_text="Employee code (unique)")

    class Meta:
        db_table = 'employees'
        ordering = ['name']


class Project(LookupEntity):
    """Project under construction."""

    EDITABLE_FIELDS = ('name', 'code')
    UNIQUE_FIELDS = ('name', 'code')
    SNAPSHOT_FIELDS = ('name', 'code')

    code = models.CharField(max_length=50, unique=True, help_text="Project code (unique)")

    class Meta:
        db_table = 'projects'
        ordering = ['name']
