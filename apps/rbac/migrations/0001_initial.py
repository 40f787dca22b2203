# Generated migration for the users table

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when the record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, db_index=True, help_text='Timestamp when the record was last updated')),
                ('username', models.CharField(help_text='Login name (unique)', max_length=150, unique=True)),
                ('password_hash', models.CharField(db_column='password_hash', help_text='Hashed password', max_length=255)),
                ('role', models.CharField(choices=[('Admin', 'Admin'), ('Accountant', 'Accountant')], db_index=True, default='Accountant', help_text='Admin or Accountant', max_length=20)),
                ('last_login_at', models.DateTimeField(blank=True, help_text='Last login timestamp', null=True)),
            ],
            options={
                'db_table': 'users',
                'ordering': ['username'],
            },
        ),
    ]
