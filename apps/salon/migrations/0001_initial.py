import apps.salon.models
import datetime
import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SalonSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(default='Salon', max_length=120)),
                ('timezone', models.CharField(default=apps.salon.models._default_timezone, help_text='IANA timezone name, e.g. America/New_York', max_length=64)),
                ('deposit_amount', models.DecimalField(decimal_places=2, default=apps.salon.models._default_deposit, help_text='Upfront deposit, charged on top of the service price.', max_digits=8, validators=[django.core.validators.MinValueValidator(0)])),
                ('notifications_enabled', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Salon Settings',
                'verbose_name_plural': 'Salon Settings',
            },
        ),
        migrations.CreateModel(
            name='BusinessHours',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('weekday', models.IntegerField(choices=[(0, 'Monday'), (1, 'Tuesday'), (2, 'Wednesday'), (3, 'Thursday'), (4, 'Friday'), (5, 'Saturday'), (6, 'Sunday')], unique=True)),
                ('is_open', models.BooleanField(default=True)),
                ('start_time', models.TimeField(default=datetime.time(9, 0))),
                ('end_time', models.TimeField(default=datetime.time(19, 0))),
            ],
            options={
                'verbose_name': 'Business Hours',
                'verbose_name_plural': 'Business Hours',
                'ordering': ['weekday'],
            },
        ),
    ]
