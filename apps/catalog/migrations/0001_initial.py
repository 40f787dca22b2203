# Generated migration for the lookup catalogs

import uuid

from django.db import migrations, models


def lookup_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
        ('updated_at', models.DateTimeField(auto_now=True, db_index=True, help_text='Timestamp when the record was last updated')),
        ('name', models.CharField(help_text='Unique display name, used as the reference key', max_length=255, unique=True)),
        ('created_by', models.UUIDField(blank=True, db_index=True, help_text='Id of the user who created the entry', null=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Account',
            fields=lookup_fields() + [
                ('code', models.CharField(help_text='Account code', max_length=50)),
                ('account_type', models.CharField(help_text='Account type, e.g. Asset', max_length=100)),
                ('account_type_code', models.CharField(help_text='Account type code', max_length=50)),
                ('sub_account', models.CharField(blank=True, default='', max_length=100)),
                ('sub_account_code', models.CharField(blank=True, default='', max_length=50)),
                ('financial_statement', models.CharField(blank=True, default='', help_text='Statement the account reports on, e.g. Balance Sheet', max_length=100)),
            ],
            options={
                'db_table': 'accounts',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Employee',
            fields=lookup_fields() + [
                ('title', models.CharField(help_text='Job title', max_length=100)),
                ('code', models.CharField(help_text='Employee code (unique)', max_length=50, unique=True)),
            ],
            options={
                'db_table': 'employees',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Project',
            fields=lookup_fields() + [
                ('code', models.CharField(help_text='Project code (unique)', max_length=50, unique=True)),
            ],
            options={
                'db_table': 'projects',
                'ordering': ['name'],
            },
        ),
    ]
