"""
Tests for business hours and salon-local time.
"""
from datetime import date, datetime, time
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from apps.bookings.tests.factories import MONDAY, TUESDAY, make_salon
from apps.salon.calendar import local_datetime, open_intervals, salon_now
from apps.salon.config import DayHours, SalonConfig, load_salon_config
from apps.salon.models import BusinessHours, SalonSettings


def _config(**kwargs):
    hours = {1: DayHours(is_open=True, start=time(9, 0), end=time(19, 0))}
    return SalonConfig(business_hours=hours, **kwargs)


class OpenIntervalsTests(TestCase):

    def test_open_day_returns_single_interval(self):
        self.assertEqual(open_intervals(_config(), TUESDAY), [(time(9, 0), time(19, 0))])

    def test_unconfigured_weekday_is_closed(self):
        self.assertEqual(open_intervals(_config(), MONDAY), [])

    def test_closed_day_returns_empty(self):
        config = SalonConfig(business_hours={
            1: DayHours(is_open=False, start=time(9, 0), end=time(19, 0)),
        })
        self.assertEqual(open_intervals(config, TUESDAY), [])

    def test_inverted_hours_yield_no_interval(self):
        config = SalonConfig(business_hours={
            1: DayHours(is_open=True, start=time(19, 0), end=time(9, 0)),
        })
        self.assertEqual(open_intervals(config, TUESDAY), [])


class SalonTimeTests(TestCase):

    def test_salon_now_converts_to_salon_zone(self):
        config = _config(timezone='America/New_York')
        instant = datetime(2035, 1, 2, 15, 0, tzinfo=ZoneInfo('UTC'))
        local = salon_now(config, instant)
        self.assertEqual((local.hour, local.minute), (10, 0))
        self.assertEqual(local.date(), date(2035, 1, 2))

    def test_salon_now_crosses_midnight(self):
        """03:00 UTC is still the previous evening in New York."""
        config = _config(timezone='America/New_York')
        local = salon_now(config, datetime(2035, 1, 3, 3, 0, tzinfo=ZoneInfo('UTC')))
        self.assertEqual(local.date(), date(2035, 1, 2))

    def test_local_datetime_is_aware(self):
        config = _config(timezone='Europe/London')
        dt = local_datetime(config, TUESDAY, time(10, 30))
        self.assertIsNotNone(dt.tzinfo)
        self.assertEqual(dt.utcoffset().total_seconds(), 0)


class SalonConfigTests(TestCase):

    def test_non_positive_interval_rejected(self):
        with self.assertRaises(ValueError):
            SalonConfig(slot_interval_minutes=0)

    @override_settings(BOOKING_SLOT_INTERVAL_MINUTES=15, BOOKING_ALLOW_DIRECT_COMPLETION=True)
    def test_load_reads_rows_and_settings(self):
        make_salon(timezone='America/Chicago', deposit='40.00')
        config = load_salon_config()

        self.assertEqual(config.timezone, 'America/Chicago')
        self.assertEqual(config.deposit_amount, Decimal('40.00'))
        self.assertEqual(config.slot_interval_minutes, 15)
        self.assertTrue(config.allow_direct_completion)
        self.assertFalse(config.hours_for(0).is_open)
        self.assertEqual(config.hours_for(1), DayHours(True, time(9, 0), time(19, 0)))

    def test_defaults_without_rows(self):
        config = load_salon_config()
        self.assertEqual(config.business_hours, {})
        self.assertEqual(config.deposit_amount, Decimal('50.00'))
        self.assertEqual(config.processing_fee_rate, Decimal('0.035'))


class ModelValidationTests(TestCase):

    def test_open_day_requires_start_before_end(self):
        hours = BusinessHours(weekday=2, is_open=True, start_time=time(18, 0), end_time=time(9, 0))
        with self.assertRaises(ValidationError):
            hours.clean()

    def test_closed_day_ignores_times(self):
        BusinessHours(weekday=2, is_open=False, start_time=time(18, 0), end_time=time(9, 0)).clean()

    def test_unknown_timezone_rejected(self):
        salon = SalonSettings(timezone='Mars/Olympus_Mons')
        with self.assertRaises(ValidationError):
            salon.clean()

    def test_settings_is_a_singleton(self):
        SalonSettings.load()
        SalonSettings(name='Second').save()
        self.assertEqual(SalonSettings.objects.count(), 1)
        self.assertEqual(SalonSettings.load().name, 'Second')
