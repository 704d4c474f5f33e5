"""
Style catalogue: Style, Variation, Pricing, Promo.

A Style ("Knotless Braids") and a Variation ("Medium") only become a bookable
offering once a Pricing row binds the pair to a price and a duration:
  - "Box Braids" + "Medium"  price=$150  duration=120
  - "Box Braids" + "Large"   price=$120  duration=90

Bookings snapshot price and duration, so editing Pricing never rewrites
existing bookings. Styles are soft-deleted only; bookings reference them
with PROTECT.
"""
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from apps.core.models import BaseModel, TimestampedModel, UUIDModel


class Style(BaseModel):
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Style'
        verbose_name_plural = 'Styles'
        ordering = ['name']

    def __str__(self):
        return self.name


class Variation(BaseModel):
    """A size/length modifier, independent of any Style."""
    name = models.CharField(max_length=80)
    description = models.TextField(blank=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = 'Variation'
        verbose_name_plural = 'Variations'
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name


class Pricing(UUIDModel, TimestampedModel):
    style = models.ForeignKey(Style, on_delete=models.CASCADE, related_name='pricing')
    variation = models.ForeignKey(Variation, on_delete=models.CASCADE, related_name='pricing')
    price = models.DecimalField(
        max_digits=8, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    duration_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text='Chair time in minutes',
    )

    class Meta:
        verbose_name = 'Pricing'
        verbose_name_plural = 'Pricing'
        ordering = ['style__name', 'variation__sort_order']
        constraints = [
            models.UniqueConstraint(fields=['style', 'variation'], name='uq_pricing_style_variation'),
        ]

    def __str__(self):
        return f"{self.style.name} / {self.variation.name} - ${self.price} ({self.duration_minutes} min)"


class Promo(BaseModel):
    """
    Time-boxed discount bound to exactly one Pricing entry.
    Either a percentage off, or a fixed promo price - never both.
    """
    pricing = models.ForeignKey(Pricing, on_delete=models.CASCADE, related_name='promos')
    title = models.CharField(max_length=150, blank=True)
    description = models.TextField(blank=True)
    promo_month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)],
    )
    promo_year = models.PositiveIntegerField()
    offer_ends = models.DateTimeField(db_index=True)
    discount_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0.01')), MaxValueValidator(100)],
    )
    promo_price = models.DecimalField(
        max_digits=8, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(0)],
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Promo'
        verbose_name_plural = 'Promos'
        ordering = ['-promo_year', '-promo_month']

    def __str__(self):
        label = self.title or 'Promo'
        return f"{label} ({self.promo_month}/{self.promo_year}) - {self.pricing}"

    def clean(self):
        has_pct = self.discount_percentage is not None
        has_price = self.promo_price is not None
        if has_pct == has_price:
            raise ValidationError('Set either a discount percentage or a promo price.')

    def is_running(self, now=None) -> bool:
        now = now or timezone.now()
        return self.is_active and not self.is_deleted and self.offer_ends >= now

    def applies_to(self, style_id, variation_id) -> bool:
        """Exact (Style, Variation) match only."""
        return (
            str(self.pricing.style_id) == str(style_id)
            and str(self.pricing.variation_id) == str(variation_id)
        )
