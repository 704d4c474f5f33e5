"""
Booking ledger - every write to a Booking goes through here.

Public API:
  get_booking(booking_id)
  reserve(style_id, variation_id, stylist_id, booking_date, start_time,
          customer_info, deposit_payment_ref, promo_id=None, ...)
  reschedule(booking_id, new_date, new_time, changed_by, ...)
  reassign(booking_id, stylist_id, changed_by, ...)
  transition(booking_id, new_status, changed_by, reason='', ...)
  check_in(booking_id, now=None, ...)
  add_payment(booking_id, amount, method, gateway_ref=None, recorded_by='', ...)
  amount_due(booking)
  stylist_schedule(stylist, start_date, days=7)

Concurrency: each write runs in one transaction that locks the stylist rows
involved (select_for_update, id order) and re-validates the slot before
writing. The partial unique constraint on (stylist, date, start) is the
backstop; an IntegrityError from it is reported as SlotNoLongerAvailable.
Notifications are queued with transaction.on_commit and never run inside
the write.
"""
import logging
from dataclasses import dataclass
from datetime import date as date_type, time as time_type, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q, Sum
from django.utils import timezone

from apps.notifications import emails
from apps.payments.coordinator import require_confirmed
from apps.payments.models import (
    IntentPurpose,
    Payment,
    PaymentIntent,
    PaymentMethod,
)
from apps.salon.calendar import local_datetime, salon_now
from apps.salon.config import SalonConfig, load_salon_config
from apps.stylists.capability import (
    eligible_stylists,
    get_running_promo,
    price_for,
    resolve,
)
from apps.stylists.models import Stylist

from .engine import _add_minutes, check_slot, free_stylists, pick_least_booked_stylist
from .exceptions import (
    CheckInWindowClosed,
    InvalidTransition,
    NoEligibleStylist,
    NotFound,
    PaymentNotConfirmed,
    SlotNoLongerAvailable,
)
from .models import Booking, BookingStatus, BookingStatusLog

logger = logging.getLogger(__name__)

SYSTEM = 'system'

# Statuses on which date, time and stylist are frozen
FROZEN_STATUSES = (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


@dataclass(frozen=True)
class Balance:
    """
    Two additive obligations: the service price and the deposit.
    The deposit is never deducted from the service price.
    """
    service_price: Decimal
    deposit_amount: Decimal
    deposit_paid: Decimal
    service_paid: Decimal
    amount_due: Decimal

    @property
    def total_paid(self) -> Decimal:
        return self.deposit_paid + self.service_paid


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _notify(func, booking, *args):
    transaction.on_commit(lambda: func(booking, *args))


def get_booking(booking_id, lock=False) -> Booking:
    qs = Booking.objects.select_related('style', 'variation', 'stylist', 'promo')
    if lock:
        qs = qs.select_for_update(of=('self',))
    try:
        return qs.get(id=booking_id)
    except (Booking.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Booking not found.")


def _lock_stylists(stylist_ids) -> list:
    """Lock stylist rows in id order so concurrent writers queue instead of deadlocking."""
    return list(
        Stylist.objects
        .select_for_update()
        .filter(id__in=stylist_ids)
        .order_by('id')
    )


def _lock_booking_stylist(booking) -> list:
    """Lock the booking's own stylist, who must still be active and able to do the style."""
    if not eligible_stylists(booking.style_id, booking.stylist_id):
        raise NoEligibleStylist(
            f"{booking.stylist.full_name} is no longer available for {booking.style.name}."
        )
    return _lock_stylists([booking.stylist_id])


def _log(booking, from_status, to_status, changed_by, reason=''):
    BookingStatusLog.objects.create(
        booking=booking,
        from_status=from_status,
        to_status=to_status,
        changed_by=changed_by,
        reason=reason,
    )


def _save_slot(booking, fields):
    """Save slot fields; a uniqueness clash means someone else got there first."""
    try:
        with transaction.atomic():
            booking.save(update_fields=fields + ['updated_at'])
    except IntegrityError as exc:
        logger.warning('Slot race lost saving booking %s: %s', booking.id, exc)
        raise SlotNoLongerAvailable(
            "This slot was just taken by another booking. Please choose a different time."
        ) from exc


# ─────────────────────────────────────────────────────────────────────────────
# Reserve
# ─────────────────────────────────────────────────────────────────────────────

def reserve(style_id, variation_id, stylist_id, booking_date: date_type, start_time: time_type,
            customer_info: dict, deposit_payment_ref, promo_id=None, customer=None,
            notes: str = '', now=None, config: SalonConfig = None, gateway=None) -> Booking:
    """
    Turn a confirmed deposit into a `booked` booking.

    `customer_info` carries full_name, email, phone and sms_consent.
    `stylist_id=None` means any available stylist: the least-booked free one
    is assigned and no stylist surcharge applies.

    Raises:
      InvalidService        - style + variation not offered
      NoEligibleStylist     - requested stylist unavailable, or nobody can do the style
      NotFound              - unknown promo or payment intent
      PaymentNotConfirmed   - deposit not succeeded, not a deposit, or already used
      InvalidSlot           - start time not on the day's slot grid
      SlotNoLongerAvailable - slot taken or passed meanwhile
    """
    config = config or load_salon_config()
    now = now or timezone.now()

    quote = resolve(style_id, variation_id)
    stylists = eligible_stylists(style_id, stylist_id)
    if not stylists:
        if stylist_id:
            raise NoEligibleStylist("The selected stylist is not available for this style.")
        raise NoEligibleStylist("No stylist currently offers this style.")

    promo = get_running_promo(promo_id, now) if promo_id else None

    # Gateway round-trip stays outside the write transaction
    intent = require_confirmed(deposit_payment_ref, gateway=gateway)
    if intent.purpose != IntentPurpose.DEPOSIT:
        raise PaymentNotConfirmed("This payment is not a booking deposit.")

    with transaction.atomic():
        intent = PaymentIntent.objects.select_for_update().get(id=intent.id)
        if intent.is_consumed:
            raise PaymentNotConfirmed("This payment has already been applied to a booking.")

        locked = _lock_stylists([s.id for s in stylists])
        free = check_slot(
            config, locked, booking_date, start_time, quote.duration_minutes, now=now,
        )
        stylist = free[0] if stylist_id else pick_least_booked_stylist(free, booking_date)

        breakdown = price_for(quote, stylist=stylist, promo=promo, apply_surcharge=bool(stylist_id))

        booking = Booking(
            customer=customer if customer is not None and customer.is_authenticated else None,
            customer_name=customer_info['full_name'],
            customer_email=customer_info.get('email', ''),
            customer_phone=customer_info.get('phone', ''),
            sms_consent=customer_info.get('sms_consent', False),
            style=quote.style,
            variation=quote.variation,
            stylist=stylist,
            promo=breakdown.promo,
            booking_date=booking_date,
            start_time=start_time,
            end_time=_add_minutes(start_time, quote.duration_minutes),
            duration_minutes=quote.duration_minutes,
            price=breakdown.total,
            surcharge_amount=breakdown.surcharge,
            discount_amount=breakdown.discount,
            deposit_amount=intent.deposit_amount,
            status=BookingStatus.BOOKED,
            notes=notes,
        )
        try:
            with transaction.atomic():
                booking.save()
        except IntegrityError as exc:
            logger.warning(
                'Slot race lost: stylist %s on %s at %s (%s)',
                stylist.id, booking_date, start_time, exc,
            )
            raise SlotNoLongerAvailable(
                "This slot was just taken by another booking. Please choose a different time."
            ) from exc

        Payment.objects.create(
            booking=booking,
            amount=intent.deposit_amount,
            method=PaymentMethod.GATEWAY,
            gateway_ref=intent.gateway_order_id,
            is_deposit=True,
            processing_fee=intent.processing_fee,
            recorded_by=SYSTEM,
            paid_at=intent.confirmed_at or now,
        )
        _log(booking, '', BookingStatus.BOOKED, customer_info['full_name'], 'Booked with confirmed deposit')

        intent.booking = booking
        intent.consumed_at = now
        intent.save(update_fields=['booking', 'consumed_at', 'updated_at'])

        _notify(emails.send_booking_confirmed, booking)

    logger.info(
        'Booking %s reserved: %s (%s) with %s on %s at %s, price %s',
        booking.id_short, quote.style.name, quote.variation.name,
        stylist.full_name, booking_date, start_time, booking.price,
    )
    return booking


# ─────────────────────────────────────────────────────────────────────────────
# Reschedule / Reassign
# ─────────────────────────────────────────────────────────────────────────────

def reschedule(booking_id, new_date: date_type, new_time: time_type, changed_by: str,
               now=None, config: SalonConfig = None) -> Booking:
    """
    Move a live booking to a new date/time with the same stylist and the
    duration snapshotted at reserve time. The booking's own window is ignored
    when checking the new slot. Raises NoEligibleStylist when that stylist
    has since been deactivated or no longer does the style.
    """
    config = config or load_salon_config()

    with transaction.atomic():
        booking = get_booking(booking_id, lock=True)
        if booking.status in FROZEN_STATUSES:
            raise InvalidTransition(f"A {booking.get_status_display().lower()} booking cannot be rescheduled.")

        locked = _lock_booking_stylist(booking)
        check_slot(
            config, locked, new_date, new_time, booking.duration_minutes,
            exclude_booking_id=booking.id, now=now,
        )

        old_date, old_time = booking.booking_date, booking.start_time
        booking.booking_date = new_date
        booking.start_time = new_time
        booking.end_time = _add_minutes(new_time, booking.duration_minutes)
        _save_slot(booking, ['booking_date', 'start_time', 'end_time'])

        _log(
            booking, booking.status, booking.status, changed_by,
            f"Rescheduled from {old_date} {old_time:%H:%M} to {new_date} {new_time:%H:%M}",
        )
        _notify(emails.send_booking_rescheduled, booking, old_date, old_time)

    logger.info('Booking %s rescheduled by %s: %s %s -> %s %s',
                booking.id_short, changed_by, old_date, old_time, new_date, new_time)
    return booking


def reassign(booking_id, stylist_id, changed_by: str) -> Booking:
    """
    Hand a live booking to another stylist who can do the style and is free
    for the booking's window. The price snapshot is left as booked.
    """
    with transaction.atomic():
        booking = get_booking(booking_id, lock=True)
        if booking.status in FROZEN_STATUSES:
            raise InvalidTransition(f"A {booking.get_status_display().lower()} booking cannot be reassigned.")
        if str(booking.stylist_id) == str(stylist_id):
            return booking

        if not eligible_stylists(booking.style_id, stylist_id):
            raise NoEligibleStylist("The selected stylist cannot take this booking.")

        locked = _lock_stylists([stylist_id])
        if not free_stylists(locked, booking.booking_date, booking.start_time,
                             booking.duration_minutes, exclude_booking_id=booking.id):
            raise SlotNoLongerAvailable("The selected stylist is busy at this time.")

        old_stylist = booking.stylist
        booking.stylist = locked[0]
        _save_slot(booking, ['stylist'])

        _log(
            booking, booking.status, booking.status, changed_by,
            f"Reassigned from {old_stylist.full_name} to {booking.stylist.full_name}",
        )
        _notify(emails.send_booking_reassigned, booking, old_stylist.full_name)

    logger.info('Booking %s reassigned by %s: %s -> %s',
                booking.id_short, changed_by, old_stylist.full_name, booking.stylist.full_name)
    return booking


# ─────────────────────────────────────────────────────────────────────────────
# Status machine
# ─────────────────────────────────────────────────────────────────────────────

def transition(booking_id, new_status, changed_by: str, reason: str = '',
               now=None, config: SalonConfig = None) -> Booking:
    """
    Move a booking along the status machine (see models.TRANSITIONS).
    Restoring a cancelled booking re-validates its slot first.

    Raises InvalidTransition for anything the machine does not allow.
    """
    config = config or load_salon_config()
    if new_status not in BookingStatus.values:
        raise InvalidTransition(f"Unknown status '{new_status}'.")
    new_status = BookingStatus(new_status)

    with transaction.atomic():
        booking = get_booking(booking_id, lock=True)
        old_status = booking.status
        if not booking.can_transition_to(new_status, config.allow_direct_completion):
            raise InvalidTransition(
                f"Cannot change a booking from {old_status} to {new_status}."
            )

        restoring = old_status == BookingStatus.CANCELLED and new_status == BookingStatus.BOOKED
        if restoring:
            locked = _lock_booking_stylist(booking)
            check_slot(
                config, locked, booking.booking_date, booking.start_time,
                booking.duration_minutes, exclude_booking_id=booking.id, now=now,
            )
            try:
                with transaction.atomic():
                    booking._transition(new_status, changed_by, reason)
            except IntegrityError as exc:
                raise SlotNoLongerAvailable(
                    "The original slot has been taken by another booking."
                ) from exc
        else:
            booking._transition(new_status, changed_by, reason)

        if new_status == BookingStatus.CANCELLED:
            _notify(emails.send_booking_cancelled, booking, reason)
        elif restoring:
            _notify(emails.send_booking_restored, booking)

    logger.info('Booking %s: %s -> %s by %s', booking.id_short, old_status, new_status, changed_by)
    return booking


def check_in(booking_id, now=None, changed_by: str = 'customer', config: SalonConfig = None) -> Booking:
    """
    Self check-in: only from `booked`, and only within the check-in window
    either side of the salon-local start time (inclusive).
    """
    config = config or load_salon_config()
    window = timedelta(minutes=config.check_in_window_minutes)

    with transaction.atomic():
        booking = get_booking(booking_id, lock=True)
        if booking.status != BookingStatus.BOOKED:
            raise InvalidTransition(f"Cannot check in a booking that is {booking.status}.")

        starts_at = local_datetime(config, booking.booking_date, booking.start_time)
        if abs(salon_now(config, now) - starts_at) > window:
            raise CheckInWindowClosed(
                f"Check-in opens {config.check_in_window_minutes} minutes before and closes "
                f"{config.check_in_window_minutes} minutes after your appointment time."
            )
        booking._transition(BookingStatus.CHECKED_IN, changed_by, 'Self check-in')

    logger.info('Booking %s checked in', booking.id_short)
    return booking


# ─────────────────────────────────────────────────────────────────────────────
# Payments
# ─────────────────────────────────────────────────────────────────────────────

def add_payment(booking_id, amount: Decimal, method: str, gateway_ref: str = None,
                recorded_by: str = '', now=None, gateway=None) -> Booking:
    """
    Append a non-deposit payment. Never changes the booking status.

    Gateway payments name the gateway order they were paid against; it must
    be confirmed, not already applied, and for the same amount.
    """
    now = now or timezone.now()
    booking = get_booking(booking_id)

    if method == PaymentMethod.GATEWAY:
        if not gateway_ref:
            raise PaymentNotConfirmed("A gateway payment needs its gateway reference.")
        intent = PaymentIntent.objects.filter(gateway_order_id=gateway_ref).first()
        if intent is None:
            raise NotFound("Payment intent not found.")
        if intent.booking_id and intent.booking_id != booking.id:
            raise PaymentNotConfirmed("This payment belongs to another booking.")
        intent = require_confirmed(intent.id, gateway=gateway)
        if intent.amount != amount:
            raise PaymentNotConfirmed("The amount does not match the confirmed payment.")
    else:
        intent = None
        gateway_ref = None

    with transaction.atomic():
        if intent is not None:
            intent = PaymentIntent.objects.select_for_update().get(id=intent.id)
            if intent.is_consumed:
                raise PaymentNotConfirmed("This payment has already been applied.")
        try:
            with transaction.atomic():
                Payment.objects.create(
                    booking=booking,
                    amount=amount,
                    method=method,
                    gateway_ref=gateway_ref,
                    is_deposit=False,
                    recorded_by=recorded_by,
                    paid_at=now,
                )
        except IntegrityError as exc:
            raise PaymentNotConfirmed("This payment has already been applied.") from exc
        if intent is not None:
            intent.booking = booking
            intent.consumed_at = now
            intent.save(update_fields=['booking', 'consumed_at', 'updated_at'])

    logger.info('Payment of %s (%s) recorded on booking %s by %s',
                amount, method, booking.id_short, recorded_by or SYSTEM)
    return booking


def amount_due(booking: Booking) -> Balance:
    """amount_due = service price + deposit - everything paid, never below zero."""
    totals = booking.payments.aggregate(
        deposit=Sum('amount', filter=Q(is_deposit=True)),
        service=Sum('amount', filter=Q(is_deposit=False)),
    )
    deposit_paid = totals['deposit'] or Decimal('0.00')
    service_paid = totals['service'] or Decimal('0.00')
    due = booking.price + booking.deposit_amount - deposit_paid - service_paid
    return Balance(
        service_price=booking.price,
        deposit_amount=booking.deposit_amount,
        deposit_paid=deposit_paid,
        service_paid=service_paid,
        amount_due=max(due, Decimal('0.00')),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Schedule
# ─────────────────────────────────────────────────────────────────────────────

def stylist_schedule(stylist: Stylist, start_date: date_type, days: int = 7) -> dict:
    """
    {date: [Booking, ...]} for each of `days` consecutive dates, non-cancelled
    bookings only, in start-time order. Days without bookings map to [].
    """
    end_date = start_date + timedelta(days=days)
    schedule = {start_date + timedelta(days=i): [] for i in range(days)}
    bookings = (
        Booking.objects
        .filter(stylist=stylist, booking_date__gte=start_date, booking_date__lt=end_date)
        .exclude(status=BookingStatus.CANCELLED)
        .select_related('style', 'variation')
        .order_by('booking_date', 'start_time')
    )
    for booking in bookings:
        schedule[booking.booking_date].append(booking)
    return schedule
