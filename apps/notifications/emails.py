"""
Email notifications for booking events.

All functions are synchronous and fire-and-forget. The ledger schedules them
with transaction.on_commit, so a failed send never touches the booking.

Public API:
  send_booking_confirmed(booking)
  send_booking_rescheduled(booking, old_date, old_time)
  send_booking_cancelled(booking, reason='')
  send_booking_reassigned(booking, old_stylist_name)
  send_booking_restored(booking)
"""
import logging
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from apps.salon.models import SalonSettings

logger = logging.getLogger(__name__)


def _booking_context(booking) -> dict:
    """Common template context for all booking emails."""
    salon = SalonSettings.load()
    return {
        'salon_name':     salon.name,
        'customer_name':  booking.customer_name,
        'style_name':     booking.style.name,
        'variation_name': booking.variation.name,
        'stylist_name':   booking.stylist.full_name,
        'booking_date':   booking.booking_date,
        'start_time':     booking.start_time,
        'end_time':       booking.end_time,
        'duration':       booking.duration_minutes,
        'price':          booking.price,
        'deposit_amount': booking.deposit_amount,
        'booking_ref':    booking.id_short,
        'check_in_url':   _check_in_url(booking),
        'support_email':  settings.DEFAULT_FROM_EMAIL,
    }


def _check_in_url(booking) -> str:
    base = getattr(settings, 'SITE_URL', 'http://127.0.0.1:8000')
    return f"{base}/api/bookings/{booking.id}/check-in/?token={booking.access_token}"


def _send(subject: str, to_email: str, template: str, context: dict):
    """Low-level send helper - builds multipart email with HTML + text fallback."""
    if not SalonSettings.load().notifications_enabled:
        logger.info('Email "%s" skipped - notifications disabled', subject)
        return
    if not to_email:
        logger.warning('Email skipped - no email address on booking %s', context.get('booking_ref'))
        return

    try:
        text_body = render_to_string(f'emails/{template}.txt', context)
        html_body = render_to_string(f'emails/{template}.html', context)

        msg = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to_email],
        )
        msg.attach_alternative(html_body, 'text/html')
        msg.send(fail_silently=False)
        logger.info('Email "%s" sent to %s', subject, to_email)
    except Exception as exc:
        # Never crash the booking flow due to email failure
        logger.exception('Failed to send email "%s" to %s: %s', subject, to_email, exc)


def _when(booking) -> str:
    return booking.booking_date.strftime('%d %b %Y')


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def send_booking_confirmed(booking):
    _send(
        subject=f'Booking Confirmed - {booking.style.name} on {_when(booking)}',
        to_email=booking.customer_email,
        template='booking_confirmed',
        context=_booking_context(booking),
    )


def send_booking_rescheduled(booking, old_date, old_time):
    ctx = _booking_context(booking)
    ctx['old_date'] = old_date
    ctx['old_time'] = old_time

    _send(
        subject=f'Booking Rescheduled - {booking.style.name} now on {_when(booking)}',
        to_email=booking.customer_email,
        template='booking_rescheduled',
        context=ctx,
    )


def send_booking_cancelled(booking, reason: str = ''):
    ctx = _booking_context(booking)
    ctx['cancellation_reason'] = reason or 'Unforeseen circumstances'

    _send(
        subject=f'Booking Cancelled - {booking.style.name} on {_when(booking)}',
        to_email=booking.customer_email,
        template='booking_cancelled',
        context=ctx,
    )


def send_booking_reassigned(booking, old_stylist_name: str):
    """Triggered: admin stylist reassignment."""
    ctx = _booking_context(booking)
    ctx['old_stylist_name'] = old_stylist_name

    _send(
        subject=f'Your Stylist Has Been Updated - {_when(booking)}',
        to_email=booking.customer_email,
        template='booking_reassigned',
        context=ctx,
    )


def send_booking_restored(booking):
    _send(
        subject=f'Booking Restored - {booking.style.name} on {_when(booking)}',
        to_email=booking.customer_email,
        template='booking_restored',
        context=_booking_context(booking),
    )
