"""
Concurrent reserves against a real database.

Each thread gets its own connection, so these only mean something on a
backend with row locks (PostgreSQL); elsewhere they are skipped.
"""
import threading
import unittest
from datetime import time

from django.db import connection
from django.test import TransactionTestCase

from apps.bookings import ledger
from apps.bookings.exceptions import SlotNoLongerAvailable
from apps.bookings.models import Booking
from apps.payments.models import PaymentIntent

from .factories import CUSTOMER_INFO, TUESDAY, make_intent, make_salon, make_service, make_stylist


@unittest.skipUnless(connection.features.has_select_for_update, 'needs row-level locking')
class ConcurrentReserveTests(TransactionTestCase):

    def setUp(self):
        make_salon()
        self.pricing = make_service('Box Braids', 'Medium', '150.00', 120)
        self.amara = make_stylist('Amara', [self.pricing.style])

    def race(self, requests):
        """Run one reserve per (stylist_id, start) from its own thread, released together."""
        intents = [make_intent() for _ in requests]
        barrier = threading.Barrier(len(requests))
        outcomes = []
        outcomes_lock = threading.Lock()

        def run(stylist_id, start, intent):
            try:
                barrier.wait()
                outcome = ledger.reserve(
                    self.pricing.style_id, self.pricing.variation_id, stylist_id,
                    TUESDAY, start, CUSTOMER_INFO, intent.id,
                )
            except Exception as exc:
                outcome = exc
            finally:
                connection.close()
            with outcomes_lock:
                outcomes.append(outcome)

        threads = [
            threading.Thread(target=run, args=(stylist_id, start, intent))
            for (stylist_id, start), intent in zip(requests, intents)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return outcomes

    def assertOneWinner(self, outcomes):
        winners = [o for o in outcomes if isinstance(o, Booking)]
        losers = [o for o in outcomes if not isinstance(o, Booking)]
        self.assertEqual(len(winners), 1, outcomes)
        self.assertTrue(all(isinstance(o, SlotNoLongerAvailable) for o in losers), outcomes)
        self.assertEqual(Booking.objects.count(), 1)
        self.assertEqual(PaymentIntent.objects.filter(consumed_at__isnull=False).count(), 1)

    def test_same_stylist_same_start(self):
        outcomes = self.race([(self.amara.id, time(10, 0))] * 4)
        self.assertOneWinner(outcomes)

    def test_any_available_overlapping_starts(self):
        # Different start times, so only the stylist row lock keeps them apart
        outcomes = self.race([(None, time(10, 0)), (None, time(11, 0)), (None, time(10, 30))])
        self.assertOneWinner(outcomes)
