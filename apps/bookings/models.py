"""
Bookings app models:
  - Booking          : Core booking record with state machine
  - BookingStatusLog : Full audit trail of transitions, reschedules and reassignments
"""
import uuid
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel, UUIDModel
from apps.styles.models import Promo, Style, Variation
from apps.stylists.models import Stylist


# ── Booking State Machine ─────────────────────────────────────────────────────

class BookingStatus(models.TextChoices):
    BOOKED      = 'booked',      'Booked'
    CHECKED_IN  = 'checked_in',  'Checked In'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED   = 'completed',   'Completed'
    CANCELLED   = 'cancelled',   'Cancelled'


# from-status -> statuses reachable through `transition()`
TRANSITIONS = {
    BookingStatus.BOOKED:      {BookingStatus.CHECKED_IN, BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED},
    BookingStatus.CHECKED_IN:  {BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED},
    BookingStatus.IN_PROGRESS: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED:   set(),
    BookingStatus.CANCELLED:   {BookingStatus.BOOKED},
}


class Booking(BaseModel):
    """
    Core booking record. Only ever created in `booked`, after the deposit
    payment is confirmed. Duration and price are snapshots taken at reserve
    time. Status changes go through `apps.bookings.ledger`, not field writes.
    """
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='bookings',
    )
    # Contact snapshot; guests have nothing else
    customer_name = models.CharField(max_length=120)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=30, blank=True)
    sms_consent = models.BooleanField(default=False)

    style = models.ForeignKey(Style, on_delete=models.PROTECT, related_name='bookings')
    variation = models.ForeignKey(Variation, on_delete=models.PROTECT, related_name='bookings')
    stylist = models.ForeignKey(Stylist, on_delete=models.PROTECT, related_name='bookings')
    promo = models.ForeignKey(
        Promo, on_delete=models.SET_NULL, null=True, blank=True, related_name='bookings',
    )

    booking_date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    duration_minutes = models.PositiveIntegerField(
        help_text='Pricing.duration_minutes at time of booking',
    )

    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)],
        help_text='Service price owed, after surcharge and promo, at time of booking',
    )
    surcharge_amount = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    deposit_amount = models.DecimalField(
        max_digits=8, decimal_places=2, default=0,
        help_text='Deposit owed on top of the service price',
    )

    status = models.CharField(
        max_length=20, choices=BookingStatus.choices,
        default=BookingStatus.BOOKED, db_index=True,
    )

    # Secret for guest self-service (check-in link), no login required
    access_token = models.UUIDField(default=uuid.uuid4, unique=True, db_index=True)

    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        ordering = ['-booking_date', '-start_time']
        # DB-level guard: no two live bookings for the same stylist+date+start.
        # Cancelled and soft-deleted rows never hold a slot.
        constraints = [
            models.UniqueConstraint(
                fields=['stylist', 'booking_date', 'start_time'],
                condition=~models.Q(status='cancelled') & models.Q(deleted_at__isnull=True),
                name='uq_live_booking_slot',
            )
        ]

    def __str__(self):
        return (
            f"#{self.id_short} | {self.customer_name} | "
            f"{self.style.name} ({self.variation.name}) | {self.booking_date} {self.start_time}"
        )

    @property
    def id_short(self):
        """Returns the first 8 chars of UUID in uppercase."""
        return str(self.id)[:8].upper()

    def can_transition_to(self, new_status, allow_direct_completion=False) -> bool:
        allowed = TRANSITIONS.get(self.status, set())
        if new_status in allowed:
            return True
        return (
            allow_direct_completion
            and self.status == BookingStatus.BOOKED
            and new_status == BookingStatus.COMPLETED
        )

    def _transition(self, new_status, changed_by, reason=''):
        old_status = self.status
        self.status = new_status
        self.save(update_fields=['status', 'updated_at'])
        BookingStatusLog.objects.create(
            booking=self,
            from_status=old_status,
            to_status=new_status,
            changed_by=changed_by,
            reason=reason,
        )


# ── Booking Audit Log ─────────────────────────────────────────────────────────

class BookingStatusLog(UUIDModel):
    """Immutable audit trail of every status transition on a booking."""
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name='status_logs')
    from_status = models.CharField(max_length=20, choices=BookingStatus.choices, blank=True)
    to_status = models.CharField(max_length=20, choices=BookingStatus.choices)
    changed_by = models.CharField(max_length=80, help_text='system / admin username / customer')
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Booking Status Log'
        verbose_name_plural = 'Booking Status Logs'
        ordering = ['changed_at']

    def __str__(self):
        return f"Booking {str(self.booking_id)[:8]}: {self.from_status or '-'} -> {self.to_status}"
