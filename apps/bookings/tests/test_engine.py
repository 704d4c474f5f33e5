"""
Tests for slot generation and write-path slot checks.
"""
import uuid
from datetime import time, timedelta

from django.test import TestCase

from apps.bookings.engine import (
    check_slot,
    free_stylists,
    get_slots,
    pick_least_booked_stylist,
)
from apps.bookings.exceptions import (
    InvalidService,
    InvalidSlot,
    NoEligibleStylist,
    SlotNoLongerAvailable,
)
from apps.bookings.models import BookingStatus
from apps.salon.config import load_salon_config
from apps.styles.models import Variation

from .factories import MONDAY, TUESDAY, at, make_booking, make_salon, make_service, make_stylist


def _available(slots):
    return [s['time'] for s in slots if s['available']]


class BoxBraidsScenarioTests(TestCase):
    """
    Box Braids / Medium, $150 for 120 minutes, Tuesday 09:00-19:00,
    one stylist already booked 10:00-12:00.
    """

    def setUp(self):
        make_salon()
        self.pricing = make_service('Box Braids', 'Medium', '150.00', 120)
        self.stylist = make_stylist('Amara', [self.pricing.style])
        make_booking(self.pricing, self.stylist, TUESDAY, time(10, 0))
        self.now = at(TUESDAY - timedelta(days=1), 12)

    def _slots(self, **kwargs):
        return get_slots(
            TUESDAY, self.pricing.style_id, self.pricing.variation_id, now=self.now, **kwargs,
        )

    def test_overlapping_starts_are_unavailable(self):
        slots = {s['time']: s['available'] for s in self._slots()}
        for blocked in ['09:00', '09:30', '10:00', '10:30', '11:00', '11:30']:
            self.assertFalse(slots[blocked], blocked)
        self.assertTrue(slots['12:00'])

    def test_available_set_is_exact(self):
        self.assertEqual(
            _available(self._slots()),
            ['12:00', '12:30', '13:00', '13:30', '14:00', '14:30',
             '15:00', '15:30', '16:00', '16:30', '17:00'],
        )

    def test_service_must_finish_by_closing(self):
        slots = self._slots()
        self.assertEqual(slots[-1]['time'], '17:00')
        self.assertEqual(slots[-1]['end'], '19:00')
        self.assertNotIn('17:30', [s['time'] for s in slots])

    def test_slots_are_chronological_with_display(self):
        slots = self._slots()
        self.assertEqual([s['time'] for s in slots], sorted(s['time'] for s in slots))
        self.assertEqual(slots[0]['display'], '9:00 AM')
        self.assertEqual(slots[8]['display'], '1:00 PM')

    def test_repeated_queries_agree(self):
        self.assertEqual(self._slots(), self._slots())

    def test_cancelled_booking_does_not_block(self):
        self.stylist.bookings.update(status=BookingStatus.CANCELLED)
        self.assertIn('10:00', _available(self._slots()))

    def test_excluded_booking_frees_its_window(self):
        booking = self.stylist.bookings.get()
        self.assertIn('10:00', _available(self._slots(exclude_booking_id=booking.id)))

    def test_second_stylist_keeps_any_available_open(self):
        make_stylist('Jada', [self.pricing.style])
        self.assertIn('10:00', _available(self._slots()))
        self.assertNotIn('10:00', _available(self._slots(stylist_id=self.stylist.id)))


class SlotEdgeCaseTests(TestCase):

    def setUp(self):
        make_salon()
        self.pricing = make_service('Cornrows', 'Large', '50.00', 30)
        self.stylist = make_stylist('Amara', [self.pricing.style])

    def _slots(self, day, now, **kwargs):
        return get_slots(day, self.pricing.style_id, self.pricing.variation_id, now=now, **kwargs)

    def test_closed_day_has_no_slots(self):
        self.assertEqual(self._slots(MONDAY, at(MONDAY, 6)), [])

    def test_past_date_is_entirely_unavailable(self):
        slots = self._slots(TUESDAY, at(TUESDAY + timedelta(days=1), 8))
        self.assertTrue(slots)
        self.assertEqual(_available(slots), [])

    def test_today_hides_started_slots(self):
        available = _available(self._slots(TUESDAY, at(TUESDAY, 11, 15)))
        self.assertEqual(available[0], '11:30')
        self.assertNotIn('11:00', available)

    def test_slot_starting_now_is_unavailable(self):
        available = _available(self._slots(TUESDAY, at(TUESDAY, 11, 0)))
        self.assertEqual(available[0], '11:30')

    def test_unpriced_pair_raises(self):
        other = Variation.objects.create(name='Jumbo')
        with self.assertRaises(InvalidService):
            get_slots(TUESDAY, self.pricing.style_id, other.id, now=at(MONDAY, 8))

    def test_incapable_stylist_raises(self):
        outsider = make_stylist('Olu', [])
        with self.assertRaises(NoEligibleStylist):
            self._slots(TUESDAY, at(MONDAY, 8), stylist_id=outsider.id)

    def test_unknown_stylist_raises(self):
        with self.assertRaises(NoEligibleStylist):
            self._slots(TUESDAY, at(MONDAY, 8), stylist_id=uuid.uuid4())

    def test_no_capable_stylists_means_nothing_available(self):
        self.stylist.is_active = False
        self.stylist.save()
        slots = self._slots(TUESDAY, at(MONDAY, 8))
        self.assertTrue(slots)
        self.assertEqual(_available(slots), [])


class CheckSlotTests(TestCase):

    def setUp(self):
        make_salon()
        self.config = load_salon_config()
        self.pricing = make_service()
        self.stylist = make_stylist('Amara', [self.pricing.style])
        self.now = at(MONDAY, 8)

    def test_returns_free_stylists(self):
        free = check_slot(self.config, [self.stylist], TUESDAY, time(9, 0), 120, now=self.now)
        self.assertEqual(free, [self.stylist])

    def test_off_grid_time_is_invalid(self):
        with self.assertRaises(InvalidSlot):
            check_slot(self.config, [self.stylist], TUESDAY, time(9, 15), 120, now=self.now)

    def test_running_past_closing_is_invalid(self):
        with self.assertRaises(InvalidSlot):
            check_slot(self.config, [self.stylist], TUESDAY, time(17, 30), 120, now=self.now)

    def test_closed_day_is_invalid(self):
        with self.assertRaises(InvalidSlot):
            check_slot(self.config, [self.stylist], MONDAY, time(10, 0), 120, now=self.now)

    def test_busy_stylist_is_unavailable(self):
        make_booking(self.pricing, self.stylist, TUESDAY, time(10, 0))
        with self.assertRaises(SlotNoLongerAvailable):
            check_slot(self.config, [self.stylist], TUESDAY, time(11, 0), 120, now=self.now)

    def test_back_to_back_is_free(self):
        make_booking(self.pricing, self.stylist, TUESDAY, time(10, 0))
        free = check_slot(self.config, [self.stylist], TUESDAY, time(12, 0), 120, now=self.now)
        self.assertEqual(free, [self.stylist])

    def test_started_slot_is_unavailable(self):
        with self.assertRaises(SlotNoLongerAvailable):
            check_slot(self.config, [self.stylist], TUESDAY, time(9, 0), 120, now=at(TUESDAY, 9, 5))


class StylistPickTests(TestCase):

    def setUp(self):
        make_salon()
        self.pricing = make_service('Cornrows', 'Large', '50.00', 30)
        self.a = make_stylist('A', [self.pricing.style])
        self.b = make_stylist('B', [self.pricing.style])

    def test_least_booked_wins(self):
        make_booking(self.pricing, self.a, TUESDAY, time(9, 0))
        self.assertEqual(pick_least_booked_stylist([self.a, self.b], TUESDAY), self.b)

    def test_cancelled_bookings_do_not_count(self):
        make_booking(self.pricing, self.a, TUESDAY, time(9, 0), status=BookingStatus.CANCELLED)
        make_booking(self.pricing, self.b, TUESDAY, time(9, 0))
        self.assertEqual(pick_least_booked_stylist([self.a, self.b], TUESDAY), self.a)

    def test_tie_breaks_on_id(self):
        expected = min([self.a, self.b], key=lambda s: str(s.id))
        self.assertEqual(pick_least_booked_stylist([self.b, self.a], TUESDAY), expected)

    def test_empty_list_raises(self):
        with self.assertRaises(SlotNoLongerAvailable):
            pick_least_booked_stylist([], TUESDAY)

    def test_free_stylists_uses_half_open_windows(self):
        make_booking(self.pricing, self.a, TUESDAY, time(9, 0))
        self.assertEqual(free_stylists([self.a, self.b], TUESDAY, time(9, 0), 30), [self.b])
        self.assertEqual(free_stylists([self.a, self.b], TUESDAY, time(9, 30), 30), [self.a, self.b])
