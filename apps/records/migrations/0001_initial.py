# Generated migration for transaction records

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='TransactionRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, db_index=True, help_text='Timestamp when the record was last updated')),
                ('date', models.DateField(help_text='Transaction date')),
                ('source_name', models.CharField(help_text='Account the money comes from', max_length=255)),
                ('source_snapshot', models.JSONField(blank=True, default=dict)),
                ('target_name', models.CharField(help_text='Account the money is paid to', max_length=255)),
                ('target_snapshot', models.JSONField(blank=True, default=dict)),
                ('description', models.TextField()),
                ('amount', models.DecimalField(decimal_places=2, help_text='Amount in the single implicit currency', max_digits=14)),
                ('employee_name', models.CharField(help_text='Employee responsible', max_length=255)),
                ('employee_snapshot', models.JSONField(blank=True, default=dict)),
                ('created_by', models.UUIDField(blank=True, db_index=True, null=True)),
                ('last_modified_by', models.UUIDField(blank=True, db_index=True, null=True)),
            ],
            options={
                'db_table': 'transaction_records',
                'ordering': ['-created_at'],
            },
        ),
    ]
