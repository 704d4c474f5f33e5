import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('bookings', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PaymentIntent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('gateway_order_id', models.CharField(max_length=100)),
                ('purpose', models.CharField(choices=[('deposit', 'Deposit'), ('balance', 'Balance')], default='deposit', max_length=10)),
                ('amount', models.DecimalField(decimal_places=2, help_text='Total charged, processing fee included', max_digits=10)),
                ('amount_minor_units', models.PositiveIntegerField()),
                ('deposit_amount', models.DecimalField(decimal_places=2, default=0, max_digits=8)),
                ('processing_fee', models.DecimalField(decimal_places=2, default=0, max_digits=8)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('status', models.CharField(choices=[('created', 'Created'), ('pending', 'Pending'), ('succeeded', 'Succeeded'), ('failed', 'Failed')], db_index=True, default='created', max_length=10)),
                ('consumed_at', models.DateTimeField(blank=True, null=True)),
                ('confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('failure_reason', models.TextField(blank=True)),
                ('booking', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payment_intents', to='bookings.booking')),
            ],
            options={
                'verbose_name': 'Payment Intent',
                'verbose_name_plural': 'Payment Intents',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='paymentintent',
            constraint=models.UniqueConstraint(fields=('gateway_order_id',), name='uq_intent_gateway_order_id'),
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('method', models.CharField(choices=[('cash', 'Cash'), ('gateway', 'Gateway')], max_length=10)),
                ('gateway_ref', models.CharField(blank=True, max_length=100, null=True)),
                ('is_deposit', models.BooleanField(default=False)),
                ('processing_fee', models.DecimalField(decimal_places=2, default=0, help_text='Gateway fee collected with this payment, not counted towards amounts owed', max_digits=8)),
                ('recorded_by', models.CharField(blank=True, max_length=80)),
                ('paid_at', models.DateTimeField()),
                ('booking', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='bookings.booking')),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'ordering': ['paid_at', 'created_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='payment',
            constraint=models.UniqueConstraint(condition=models.Q(('gateway_ref__isnull', False)), fields=('gateway_ref',), name='uq_payment_gateway_ref'),
        ),
    ]
