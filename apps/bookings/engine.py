"""
Availability engine - pure read-only business logic, no HTTP/request awareness.

Public API:
  get_slots(booking_date, style_id, variation_id, stylist_id=None, exclude_booking_id=None)
  slots_for_stylists(config, stylists, booking_date, duration_minutes, ...)
  check_slot(config, stylists, booking_date, start_time, duration_minutes, ...)
  free_stylists(stylists, booking_date, start_time, duration_minutes, exclude_booking_id=None)
  pick_least_booked_stylist(stylists, booking_date)

Nothing here locks or writes. `apps.bookings.ledger` re-runs `check_slot`
inside its write transaction before committing anything.
"""
from datetime import datetime, timedelta, date as date_type, time as time_type

from django.db.models import Count

from apps.bookings.exceptions import (
    InvalidSlot,
    NoEligibleStylist,
    SlotNoLongerAvailable,
)
from apps.bookings.models import Booking, BookingStatus
from apps.salon.calendar import local_datetime, open_intervals, salon_now
from apps.salon.config import SalonConfig, load_salon_config
from apps.stylists.capability import eligible_stylists, resolve


# ── Time helpers ──────────────────────────────────────────────────────────────

def _add_minutes(t: time_type, minutes: int) -> time_type:
    """Add minutes to a time object."""
    dt = datetime.combine(date_type.min, t) + timedelta(minutes=minutes)
    return dt.time()


def _fmt_time(t: time_type) -> str:
    """
    Format time as '9:00 AM' without a leading zero on the hour.
    strftime('%-I') is platform-specific, so build it by hand.
    """
    hour = t.hour % 12 or 12
    minute = t.strftime('%M')
    ampm = 'AM' if t.hour < 12 else 'PM'
    return f"{hour}:{minute} {ampm}"


def _time_to_minutes(t: time_type) -> int:
    return t.hour * 60 + t.minute


def _minutes_to_time(m: int) -> time_type:
    return time_type(m // 60, m % 60)


def _overlaps(a_start: time_type, a_end: time_type,
              b_start: time_type, b_end: time_type) -> bool:
    """True if [a_start, a_end) intersects [b_start, b_end)."""
    return _time_to_minutes(a_start) < _time_to_minutes(b_end) and \
           _time_to_minutes(b_start) < _time_to_minutes(a_end)


# ── Occupied window helpers ───────────────────────────────────────────────────

def _get_occupied_windows(stylists, booking_date: date_type, exclude_booking_id=None) -> dict:
    """
    {stylist_id: [(start, end), ...]} for every non-cancelled booking of the
    given stylists on `booking_date`. `exclude_booking_id` drops one booking,
    so a reschedule can be checked against everything except itself.
    """
    occupied = {s.id: [] for s in stylists}
    qs = (
        Booking.objects
        .filter(stylist__in=stylists, booking_date=booking_date)
        .exclude(status=BookingStatus.CANCELLED)
        .values_list('stylist_id', 'start_time', 'duration_minutes')
    )
    if exclude_booking_id:
        qs = qs.exclude(id=exclude_booking_id)
    for stylist_id, start, duration in qs:
        occupied.setdefault(stylist_id, []).append((start, _add_minutes(start, duration)))
    return occupied


def _candidate_starts(intervals: list, duration_minutes: int, step_minutes: int) -> list:
    """
    Start times on a fixed grid inside each open interval such that the whole
    service fits before the interval closes.
    """
    starts = []
    for open_t, close_t in intervals:
        current = _time_to_minutes(open_t)
        close = _time_to_minutes(close_t)
        while current + duration_minutes <= close:
            starts.append(_minutes_to_time(current))
            current += step_minutes
    return starts


def _has_started(config: SalonConfig, booking_date: date_type, start: time_type, now_local) -> bool:
    """True if the slot's start is at or before salon-local now (covers past dates too)."""
    return local_datetime(config, booking_date, start) <= now_local


def free_stylists(stylists, booking_date: date_type, start_time: time_type,
                  duration_minutes: int, exclude_booking_id=None, occupied=None) -> list:
    """Stylists from `stylists` with no overlapping booking for [start, start+duration)."""
    if occupied is None:
        occupied = _get_occupied_windows(stylists, booking_date, exclude_booking_id)
    end_time = _add_minutes(start_time, duration_minutes)
    return [
        s for s in stylists
        if not any(_overlaps(start_time, end_time, occ_s, occ_e)
                   for occ_s, occ_e in occupied.get(s.id, []))
    ]


# ── Core: Slot Generation ─────────────────────────────────────────────────────

def slots_for_stylists(config: SalonConfig, stylists: list, booking_date: date_type,
                       duration_minutes: int, exclude_booking_id=None, now=None) -> list:
    """
    Every candidate start on `booking_date` for a job of `duration_minutes`,
    available iff it has not started yet and at least one of `stylists` is free.

    Returns a chronological list of dicts:
      [{"time": "09:00", "end": "11:00", "display": "9:00 AM", "available": True}, ...]

    Empty list means the salon is closed that day.
    """
    intervals = open_intervals(config, booking_date)
    if not intervals:
        return []

    now_local = salon_now(config, now)
    occupied = _get_occupied_windows(stylists, booking_date, exclude_booking_id)

    slots = []
    for start in _candidate_starts(intervals, duration_minutes, config.slot_interval_minutes):
        end = _add_minutes(start, duration_minutes)
        available = (
            not _has_started(config, booking_date, start, now_local)
            and bool(free_stylists(stylists, booking_date, start, duration_minutes, occupied=occupied))
        )
        slots.append({
            'time': start.strftime('%H:%M'),
            'end': end.strftime('%H:%M'),
            'display': _fmt_time(start),
            'available': available,
        })
    return slots


def get_slots(booking_date: date_type, style_id, variation_id, stylist_id=None,
              exclude_booking_id=None, now=None, config: SalonConfig = None) -> list:
    """
    Bookable start times for a style + variation (+ optional stylist) on a date.

    Raises:
      InvalidService    - no Pricing for the style + variation
      NoEligibleStylist - a specific stylist was requested but is inactive or not capable
    """
    config = config or load_salon_config()
    quote = resolve(style_id, variation_id)

    stylists = eligible_stylists(style_id, stylist_id)
    if stylist_id and not stylists:
        raise NoEligibleStylist("The selected stylist is not available for this style.")

    return slots_for_stylists(
        config, stylists, booking_date, quote.duration_minutes,
        exclude_booking_id=exclude_booking_id, now=now,
    )


# ── Core: Write-path re-validation ────────────────────────────────────────────

def check_slot(config: SalonConfig, stylists: list, booking_date: date_type,
               start_time: time_type, duration_minutes: int,
               exclude_booking_id=None, now=None) -> list:
    """
    Re-validate one slot for the write path. Returns the free stylists.

    Raises:
      InvalidSlot           - closed day, off the slot grid, or runs past closing
      SlotNoLongerAvailable - start already passed, or every stylist is busy
    """
    intervals = open_intervals(config, booking_date)
    candidates = _candidate_starts(intervals, duration_minutes, config.slot_interval_minutes)
    if start_time.replace(second=0, microsecond=0) not in candidates:
        raise InvalidSlot("The requested time is not a bookable slot for this service.")

    if _has_started(config, booking_date, start_time, salon_now(config, now)):
        raise SlotNoLongerAvailable("This time has already passed. Please choose a later slot.")

    free = free_stylists(stylists, booking_date, start_time, duration_minutes, exclude_booking_id)
    if not free:
        raise SlotNoLongerAvailable(
            "This slot was just taken by another booking. Please choose a different time."
        )
    return free


# ── Core: "Any Stylist" Support ───────────────────────────────────────────────

def pick_least_booked_stylist(stylists: list, booking_date: date_type):
    """
    From a list of free stylists, pick the one with the fewest non-cancelled
    bookings on `booking_date` (fairness distribution).
    Tie-break: lowest UUID string (deterministic).

    Raises SlotNoLongerAvailable if the list is empty.
    """
    if not stylists:
        raise SlotNoLongerAvailable("No stylists are free for the selected slot.")

    counts = dict(
        Booking.objects
        .filter(stylist__in=stylists, booking_date=booking_date)
        .exclude(status=BookingStatus.CANCELLED)
        .values('stylist_id')
        .annotate(n=Count('id'))
        .values_list('stylist_id', 'n')
    )
    return min(stylists, key=lambda s: (counts.get(s.id, 0), str(s.id)))
