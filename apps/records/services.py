"""
Record engine.

Creation validates every reference strictly and freezes a snapshot of each.
Updates are permissive: a reference that resolves gets a fresh snapshot, one
that does not keeps the stale snapshot while the new name is still stored.
"""
import logging

from apps.catalog import services as catalog
from apps.core.exceptions import InvalidReference, NotFound, ValidationError
from apps.records.models import TransactionRecord
from apps.records.snapshots import freeze_snapshot

logger = logging.getLogger(__name__)


class RecordService:
    """Service for transaction record operations."""

    EDITABLE_FIELDS = (
        'date', 'source_name', 'target_name', 'description', 'amount', 'employee_name',
    )

    # (name field, snapshot field, registry attribute on apps.catalog.services)
    REFERENCES = (
        ('source_name', 'source_snapshot', 'accounts'),
        ('target_name', 'target_snapshot', 'accounts'),
        ('employee_name', 'employee_snapshot', 'employees'),
    )

    @classmethod
    def _registry(cls, attr):
        return getattr(catalog, attr)

    @classmethod
    def create(cls, data, acting_user):
        """
        Create a record after resolving all three references.

        Args:
            data: Dict with date, source_name, target_name, description,
                  amount, employee_name
            acting_user: User stamped as created_by and last_modified_by

        Returns:
            TransactionRecord

        Raises:
            InvalidReference: an account or the employee does not exist
            ValidationError: unknown field
        """
        cls._check_fields(data)

        snapshots = {
            snapshot_field: freeze_snapshot(cls._registry(registry), data.get(name_field))
            for name_field, snapshot_field, registry in cls.REFERENCES
        }

        missing_accounts = [
            name_field for name_field, snapshot_field, registry in cls.REFERENCES
            if registry == 'accounts' and snapshots[snapshot_field] is None
        ]
        if missing_accounts:
            raise InvalidReference(
                'Invalid account selection',
                details={field: data.get(field) for field in missing_accounts}
            )

        if snapshots['employee_snapshot'] is None:
            raise InvalidReference(
                'Invalid employee selection',
                details={'employee_name': data.get('employee_name')}
            )

        record = TransactionRecord.objects.create(
            **data,
            **snapshots,
            created_by=acting_user.id,
            last_modified_by=acting_user.id,
        )

        logger.info(
            f"Record created: {record.id}",
            extra={'record_id': str(record.id), 'user_id': str(acting_user.id)}
        )
        return record

    @classmethod
    def update(cls, record_id, changes, acting_user):
        """
        Apply a partial update and stamp the modifier.

        Every supplied field is stored as given. For each supplied reference
        name that currently resolves, the matching snapshot is refreshed from
        the catalog; otherwise the existing snapshot is kept.

        Raises:
            NotFound: no record with that id
            ValidationError: unknown field
        """
        cls._check_fields(changes)
        record = cls.get(record_id)

        for field, value in changes.items():
            setattr(record, field, value)
        update_fields = set(changes) | {'last_modified_by', 'updated_at'}

        for name_field, snapshot_field, registry in cls.REFERENCES:
            if name_field not in changes:
                continue

            snapshot = freeze_snapshot(cls._registry(registry), changes[name_field])
            if snapshot is not None:
                setattr(record, snapshot_field, snapshot)
                update_fields.add(snapshot_field)
            else:
                logger.info(
                    f"Record {record.id}: '{changes[name_field]}' does not resolve, keeping {snapshot_field}",
                    extra={'record_id': str(record.id), 'field': name_field}
                )

        record.last_modified_by = acting_user.id
        # Write only the touched columns
        record.save(update_fields=sorted(update_fields))
        record.refresh_from_db()

        logger.info(
            f"Record updated: {record.id}",
            extra={
                'record_id': str(record.id),
                'user_id': str(acting_user.id),
                'fields': sorted(changes),
            }
        )
        return record

    @classmethod
    def delete(cls, record_id, acting_user=None):
        """
        Hard delete a record.

        Raises:
            NotFound: no record with that id
        """
        record = cls.get(record_id)
        record.delete()

        logger.info(
            f"Record deleted: {record_id}",
            extra={
                'record_id': str(record_id),
                'user_id': str(acting_user.id) if acting_user else None,
            }
        )

    @staticmethod
    def list():
        """All records, newest first."""
        return TransactionRecord.objects.newest_first()

    @staticmethod
    def get(record_id):
        record = TransactionRecord.objects.filter(id=record_id).first()
        if record is None:
            raise NotFound('Record not found')
        return record

    @staticmethod
    def usernames_for(records):
        """
        Map the creator and last-modifier ids of records to usernames.

        Ids of deleted users are absent from the map.
        """
        from apps.rbac.models import User

        user_ids = set()
        for record in records:
            user_ids.update(uid for uid in (record.created_by, record.last_modified_by) if uid)

        if not user_ids:
            return {}

        return dict(User.objects.filter(id__in=user_ids).values_list('id', 'username'))

    @classmethod
    def _check_fields(cls, data):
        unknown = set(data) - set(cls.EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(
                'Unknown fields',
                details={name: ['This field is not allowed.'] for name in sorted(unknown)}
            )
