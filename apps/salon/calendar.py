"""
Calendar rules - weekly business hours resolved against concrete dates.

Public API:
  open_intervals(config, booking_date)
  salon_now(config, now=None)
  local_datetime(config, booking_date, wall_time)

All wall-clock times are in the salon's configured timezone, never the
caller's.
"""
from datetime import date as date_type, datetime, time as time_type

from django.utils import timezone

from .config import SalonConfig


def open_intervals(config: SalonConfig, booking_date: date_type) -> list:
    """
    Returns [(start, end)] wall-clock intervals the salon is open on
    `booking_date`, or [] if that weekday is closed or unconfigured.
    """
    day = config.hours_for(booking_date.weekday())
    if day is None or not day.is_open:
        return []
    # Misconfigured rows never yield an interval
    if day.start >= day.end:
        return []
    return [(day.start, day.end)]


def salon_now(config: SalonConfig, now: datetime = None) -> datetime:
    """The given (or current) instant as an aware datetime in salon-local time."""
    now = now or timezone.now()
    if timezone.is_naive(now):
        now = timezone.make_aware(now, timezone.get_default_timezone())
    return timezone.localtime(now, config.tzinfo)


def local_datetime(config: SalonConfig, booking_date: date_type, wall_time: time_type) -> datetime:
    """Aware datetime for a salon-local wall-clock time on `booking_date`."""
    return datetime.combine(booking_date, wall_time, tzinfo=config.tzinfo)
