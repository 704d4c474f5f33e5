"""
Salon-wide settings and weekly business hours.

Both are admin-edited configuration; the booking engine never reads them
directly but through `apps.salon.config.load_salon_config()`.
"""
from datetime import time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import SingletonModel, TimestampedModel


def _default_deposit():
    return settings.BOOKING_DEFAULT_DEPOSIT_AMOUNT


def _default_timezone():
    return settings.TIME_ZONE


class SalonSettings(SingletonModel, TimestampedModel):
    name = models.CharField(max_length=120, default='Salon')
    timezone = models.CharField(
        max_length=64, default=_default_timezone,
        help_text='IANA timezone name, e.g. America/New_York',
    )
    deposit_amount = models.DecimalField(
        max_digits=8, decimal_places=2, default=_default_deposit,
        validators=[MinValueValidator(0)],
        help_text='Upfront deposit, charged on top of the service price.',
    )
    notifications_enabled = models.BooleanField(default=True)

    class Meta:
        verbose_name = 'Salon Settings'
        verbose_name_plural = 'Salon Settings'

    def __str__(self):
        return f"{self.name} ({self.timezone})"

    def clean(self):
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError({'timezone': f"Unknown timezone '{self.timezone}'."})


class BusinessHours(models.Model):
    WEEKDAY_CHOICES = [
        (0, 'Monday'), (1, 'Tuesday'), (2, 'Wednesday'),
        (3, 'Thursday'), (4, 'Friday'), (5, 'Saturday'), (6, 'Sunday'),
    ]

    weekday = models.IntegerField(choices=WEEKDAY_CHOICES, unique=True)
    is_open = models.BooleanField(default=True)
    start_time = models.TimeField(default=time(9, 0))
    end_time = models.TimeField(default=time(19, 0))

    class Meta:
        verbose_name = 'Business Hours'
        verbose_name_plural = 'Business Hours'
        ordering = ['weekday']

    def __str__(self):
        if not self.is_open:
            return f"{self.get_weekday_display()}: Closed"
        return (
            f"{self.get_weekday_display()}: "
            f"{self.start_time.strftime('%H:%M')}-{self.end_time.strftime('%H:%M')}"
        )

    def clean(self):
        # Closed days keep whatever times they had; they are ignored.
        if self.is_open and self.start_time >= self.end_time:
            raise ValidationError('Opening time must be before closing time.')
