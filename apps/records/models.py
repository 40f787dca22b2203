"""
Transaction record model.

A record names its source account, target account and employee, and
carries a frozen copy (snapshot) of each referenced catalog entry as it
was when the reference was last written.
"""
from django.db import models
from apps.core.models import BaseModel


class TransactionRecordQuerySet(models.QuerySet):

    def newest_first(self):
        return self.order_by('-created_at')


class TransactionRecord(BaseModel):
    """
    A single business transaction.

    Snapshots are written only by the record service at create time and when
    an update names a reference that resolves; they are never computed on read.
    """

    date = models.DateField(help_text="Transaction date")

    source_name = models.CharField(max_length=255, help_text="Account the money comes from")
    source_snapshot = models.JSONField(default=dict, blank=True)

    target_name = models.CharField(max_length=255, help_text="Account the money is paid to")
    target_snapshot = models.JSONField(default=dict, blank=True)

    description = models.TextField()
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Amount in the single implicit currency"
    )

    employee_name = models.CharField(max_length=255, help_text="Employee responsible")
    employee_snapshot = models.JSONField(default=dict, blank=True)

    # Plain ids: users may be deleted while their records remain
    created_by = models.UUIDField(null=True, blank=True, db_index=True)
    last_modified_by = models.UUIDField(null=True, blank=True, db_index=True)

    objects = TransactionRecordQuerySet.as_manager()

    class Meta:
        db_table = 'transaction_records'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.date} {self.source_name} -> {self.target_name}: {self.amount}"
