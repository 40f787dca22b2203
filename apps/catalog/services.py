"""
Lookup registry service.

One LookupRegistry instance per catalog (accounts, employees, projects)
provides list/get/create/update/delete plus name resolution for the
record engine.
"""
import logging

from django.db import IntegrityError, transaction

from apps.catalog.models import Account, Employee, Project
from apps.core.exceptions import DuplicateName, NotFound, ValidationError

logger = logging.getLogger(__name__)


class LookupRegistry:
    """CRUD and name resolution for one catalog model."""

    def __init__(self, model, label):
        self.model = model
        self.label = label

    def __repr__(self):
        return f'<LookupRegistry {self.label}>'

    def list(self):
        """All entries ordered by name."""
        return self.model.objects.order_by('name')

    def get(self, entity_id):
        """
        Get entry by id.

        Raises:
            NotFound: no entry with that id
        """
        entity = self.model.objects.filter(id=entity_id).first()
        if entity is None:
            raise NotFound(f'{self.label} not found')
        return entity

    def resolve(self, name):
        """Entry currently holding this name, or None."""
        if not name:
            return None
        return self.model.objects.by_name(name)

    def create(self, attrs, acting_user=None):
        """
        Create an entry.

        Args:
            attrs: Dict of EDITABLE_FIELDS values
            acting_user: User recorded as created_by

        Raises:
            DuplicateName: name (or another unique field) already taken
            ValidationError: unknown field
        """
        self._check_fields(attrs)
        self._check_unique(attrs)

        entity = self.model(**attrs)
        entity.created_by = acting_user.id if acting_user is not None else None
        self._save(entity)

        logger.info(
            f"{self.label} created: {entity.name}",
            extra={
                'entity_id': str(entity.id),
                'user_id': str(entity.created_by) if entity.created_by else None,
            }
        )
        return entity

    def update(self, entity_id, attrs):
        """
        Apply a partial update.

        Records that already reference the entry keep their snapshot.

        Raises:
            NotFound: no entry with that id
            DuplicateName: new value of a unique field taken by another entry
            ValidationError: unknown field
        """
        self._check_fields(attrs)
        entity = self.get(entity_id)
        self._check_unique(attrs, exclude_id=entity.id)

        for field, value in attrs.items():
            setattr(entity, field, value)
        self._save(entity, update_fields=[*attrs, 'updated_at'])
        entity.refresh_from_db()

        logger.info(
            f"{self.label} updated: {entity.name}",
            extra={'entity_id': str(entity.id), 'fields': sorted(attrs)}
        )
        return entity

    def delete(self, entity_id):
        """
        Hard delete an entry. Records referencing it are untouched.

        Raises:
            NotFound: no entry with that id
        """
        entity = self.get(entity_id)
        name = entity.name
        entity.delete()

        logger.info(f"{self.label} deleted: {name}", extra={'entity_id': str(entity_id)})

    def _check_fields(self, attrs):
        unknown = set(attrs) - set(self.model.EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(
                'Unknown fields',
                details={name: ['This field is not allowed.'] for name in sorted(unknown)}
            )

    def _check_unique(self, attrs, exclude_id=None):
        for field in self.model.UNIQUE_FIELDS:
            if field not in attrs:
                continue

            clashes = self.model.objects.filter(**{field: attrs[field]})
            if exclude_id is not None:
                clashes = clashes.exclude(id=exclude_id)

            if clashes.exists():
                raise DuplicateName(
                    f"{self.label} with {field} '{attrs[field]}' already exists",
                    details={'field': field}
                )

    def _save(self, entity, update_fields=None):
        # The unique index is the final arbiter when two writers race
        try:
            with transaction.atomic():
                entity.save(update_fields=update_fields)
        except IntegrityError:
            field = self._clashing_field(entity)
            raise DuplicateName(
                f"{self.label} with {field} '{getattr(entity, field)}' already exists",
                details={'field': field}
            )

    def _clashing_field(self, entity):
        for field in self.model.UNIQUE_FIELDS:
            others = self.model.objects.filter(**{field: getattr(entity, field)}).exclude(id=entity.id)
            if others.exists():
                return field
        return self.model.UNIQUE_FIELDS[0]


accounts = LookupRegistry(Account, 'Account')
employees = LookupRegistry(Employee, 'Employee')
projects = LookupRegistry(Project, 'Project')
