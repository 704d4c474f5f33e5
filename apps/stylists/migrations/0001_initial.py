from django.conf import settings
import django.core.validators
import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('styles', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Stylist',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('full_name', models.CharField(max_length=120)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('bio', models.TextField(blank=True)),
                ('skill_level', models.CharField(choices=[('BEGINNER', 'Beginner'), ('INTERMEDIATE', 'Intermediate'), ('ADVANCED', 'Advanced'), ('EXPERT', 'Expert')], default='INTERMEDIATE', max_length=20)),
                ('surcharge', models.DecimalField(decimal_places=2, default=0, help_text='Base surcharge added to every style this stylist performs.', max_digits=8, validators=[django.core.validators.MinValueValidator(0)])),
                ('surcharge_eligible', models.BooleanField(default=False, help_text='Surcharges (base or per-style) only apply when this is set.')),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('styles', models.ManyToManyField(blank=True, related_name='stylists', to='styles.style')),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stylist_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Stylist',
                'verbose_name_plural': 'Stylists',
                'ordering': ['full_name'],
            },
        ),
        migrations.CreateModel(
            name='StyleSurcharge',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=8, validators=[django.core.validators.MinValueValidator(0)])),
                ('style', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stylist_surcharges', to='styles.style')),
                ('stylist', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='style_surcharges', to='stylists.stylist')),
            ],
            options={
                'verbose_name': 'Style Surcharge',
                'verbose_name_plural': 'Style Surcharges',
                'ordering': ['stylist', 'style'],
                'unique_together': {('stylist', 'style')},
            },
        ),
    ]
