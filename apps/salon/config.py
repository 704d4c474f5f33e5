"""
Salon configuration snapshot.

`load_salon_config()` reads the SalonSettings row, the BusinessHours rows and
the booking/payment entries of Django settings once, and returns an immutable
`SalonConfig` that is passed explicitly into the calendar, availability,
ledger and payment code.
"""
from dataclasses import dataclass, field
from datetime import time
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.conf import settings

from .models import BusinessHours, SalonSettings


@dataclass(frozen=True)
class DayHours:
    is_open: bool
    start: time
    end: time


@dataclass(frozen=True)
class SalonConfig:
    """
    Attributes:
        timezone: IANA zone all wall-clock times are interpreted in
        business_hours: weekday (0=Mon) -> DayHours; a missing weekday is closed
        deposit_amount: upfront deposit, additive to the service price
        processing_fee_rate: gateway fee added on top of the deposit charge
        slot_interval_minutes: candidate start-time granularity
        check_in_window_minutes: self check-in allowed this far either side of start
    """
    timezone: str = 'UTC'
    business_hours: dict = field(default_factory=dict)
    deposit_amount: Decimal = Decimal('50.00')
    processing_fee_rate: Decimal = Decimal('0.035')
    currency: str = 'USD'
    notifications_enabled: bool = True
    slot_interval_minutes: int = 30
    check_in_window_minutes: int = 30
    allow_direct_completion: bool = False

    def __post_init__(self):
        if self.slot_interval_minutes <= 0:
            raise ValueError(
                f"slot_interval_minutes must be positive, got {self.slot_interval_minutes}"
            )

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def hours_for(self, weekday: int):
        return self.business_hours.get(weekday)


def load_salon_config() -> SalonConfig:
    salon = SalonSettings.load()
    hours = {
        row.weekday: DayHours(is_open=row.is_open, start=row.start_time, end=row.end_time)
        for row in BusinessHours.objects.all()
    }
    return SalonConfig(
        timezone=salon.timezone,
        business_hours=hours,
        deposit_amount=salon.deposit_amount,
        processing_fee_rate=Decimal(str(settings.PAYMENT_PROCESSING_FEE_RATE)),
        currency=settings.PAYMENT_CURRENCY,
        notifications_enabled=salon.notifications_enabled,
        slot_interval_minutes=settings.BOOKING_SLOT_INTERVAL_MINUTES,
        check_in_window_minutes=settings.BOOKING_CHECK_IN_WINDOW_MINUTES,
        allow_direct_completion=settings.BOOKING_ALLOW_DIRECT_COMPLETION,
    )
