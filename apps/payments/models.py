"""
Payments app models:
  - PaymentIntent : one gateway order, created before the customer pays
  - Payment       : money actually applied to a booking (deposit, balance, cash)

Null-safety note on unique fields:
  Gateway references are only unique when present, so they are declared as
  conditional UniqueConstraints in Meta.constraints rather than field-level
  unique=True (NULLs never conflict).
"""
from django.db import models
from apps.core.models import UUIDModel, TimestampedModel
from apps.bookings.models import Booking


class IntentStatus(models.TextChoices):
    CREATED   = 'created',   'Created'
    PENDING   = 'pending',   'Pending'
    SUCCEEDED = 'succeeded', 'Succeeded'
    FAILED    = 'failed',    'Failed'


class IntentPurpose(models.TextChoices):
    DEPOSIT = 'deposit', 'Deposit'
    BALANCE = 'balance', 'Balance'


class PaymentMethod(models.TextChoices):
    CASH    = 'cash',    'Cash'
    GATEWAY = 'gateway', 'Gateway'


class PaymentIntent(UUIDModel, TimestampedModel):
    """
    Gateway order reference plus the amounts we asked for.
    Never holds a slot: a booking only exists once the intent has succeeded
    and `apps.bookings.ledger.reserve` has consumed it.
    """
    gateway_order_id = models.CharField(max_length=100)
    purpose = models.CharField(
        max_length=10, choices=IntentPurpose.choices, default=IntentPurpose.DEPOSIT,
    )
    amount = models.DecimalField(
        max_digits=10, decimal_places=2, help_text='Total charged, processing fee included',
    )
    amount_minor_units = models.PositiveIntegerField()
    deposit_amount = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    processing_fee = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, default='USD')
    status = models.CharField(
        max_length=10, choices=IntentStatus.choices, default=IntentStatus.CREATED, db_index=True,
    )
    # Balance intents name their booking up front; deposit intents get it when consumed
    booking = models.ForeignKey(
        Booking, on_delete=models.SET_NULL, null=True, blank=True, related_name='payment_intents',
    )
    consumed_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    failure_reason = models.TextField(blank=True)

    class Meta:
        verbose_name = 'Payment Intent'
        verbose_name_plural = 'Payment Intents'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['gateway_order_id'],
                name='uq_intent_gateway_order_id',
            ),
        ]

    def __str__(self):
        return f"Intent {self.gateway_order_id} [{self.status}] {self.amount} {self.currency}"

    @property
    def is_consumed(self) -> bool:
        return self.consumed_at is not None


class Payment(UUIDModel, TimestampedModel):
    """
    One amount applied to a booking. A booking accumulates several:
    the deposit at reserve time, then balance payments at or after completion.
    `is_deposit` is explicit; it is never inferred from insertion order.
    """
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    method = models.CharField(max_length=10, choices=PaymentMethod.choices)
    # Gateway order id for gateway payments; empty for cash
    gateway_ref = models.CharField(max_length=100, blank=True, null=True)
    is_deposit = models.BooleanField(default=False)
    processing_fee = models.DecimalField(
        max_digits=8, decimal_places=2, default=0,
        help_text='Gateway fee collected with this payment, not counted towards amounts owed',
    )
    recorded_by = models.CharField(max_length=80, blank=True)
    paid_at = models.DateTimeField()

    class Meta:
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        ordering = ['paid_at', 'created_at']
        constraints = [
            # A gateway reference pays for exactly one thing
            models.UniqueConstraint(
                fields=['gateway_ref'],
                condition=models.Q(gateway_ref__isnull=False),
                name='uq_payment_gateway_ref',
            ),
        ]

    def __str__(self):
        kind = 'deposit' if self.is_deposit else self.method
        return f"Payment {self.amount} ({kind}) for booking {str(self.booking_id)[:8].upper()}"
