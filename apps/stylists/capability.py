"""
Capability resolver - what a (style, variation, stylist) request costs, how
long it takes and who may perform it.

Public API:
  resolve(style_id, variation_id)
  eligible_stylists(style_id, requested_stylist_id=None)
  surcharge_for(stylist, style)
  get_running_promo(promo_id, now=None)
  price_for(quote, stylist=None, promo=None, apply_surcharge=True)
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError

from apps.bookings.exceptions import InvalidService, NotFound
from apps.styles.models import Pricing, Promo
from apps.stylists.models import StyleSurcharge, Stylist

CENTS = Decimal('0.01')


@dataclass(frozen=True)
class ServiceQuote:
    pricing: Pricing
    duration_minutes: int
    base_price: Decimal

    @property
    def style(self):
        return self.pricing.style

    @property
    def variation(self):
        return self.pricing.variation


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: Decimal
    surcharge: Decimal
    discount: Decimal
    total: Decimal
    promo: Promo = None


def resolve(style_id, variation_id) -> ServiceQuote:
    """
    Duration and base price for a style + variation pair.
    Raises InvalidService if no Pricing binds the pair or the style is retired.
    """
    try:
        pricing = Pricing.objects.select_related('style', 'variation').get(
            style_id=style_id,
            variation_id=variation_id,
            style__is_active=True,
            style__deleted_at__isnull=True,
            variation__deleted_at__isnull=True,
        )
    except (Pricing.DoesNotExist, ValidationError, ValueError):
        raise InvalidService("This style and variation combination is not offered.")
    return ServiceQuote(
        pricing=pricing,
        duration_minutes=pricing.duration_minutes,
        base_price=pricing.price,
    )


def eligible_stylists(style_id, requested_stylist_id=None) -> list:
    """
    Active stylists able to perform `style_id`.

    With a requested stylist: [that stylist] if active and capable, else [].
    An empty list here means "this stylist is unavailable", which callers
    report distinctly from "no free slots".
    """
    qs = Stylist.objects.filter(is_active=True, styles__id=style_id)
    if requested_stylist_id:
        try:
            return list(qs.filter(id=requested_stylist_id))
        except (ValidationError, ValueError):
            return []
    return list(qs.order_by('full_name', 'id'))


def surcharge_for(stylist: Stylist, style) -> Decimal:
    """Per-style override, else base surcharge; zero unless the stylist is surcharge-eligible."""
    if stylist is None or not stylist.surcharge_eligible:
        return Decimal('0.00')
    override = (
        StyleSurcharge.objects
        .filter(stylist=stylist, style=style)
        .values_list('amount', flat=True)
        .first()
    )
    if override is not None:
        return override
    return stylist.surcharge or Decimal('0.00')


def get_running_promo(promo_id, now=None) -> Promo:
    """
    Load a promo by id. Unknown ids raise NotFound; an expired or disabled
    promo is returned as None so the booking simply goes ahead at list price.
    """
    try:
        promo = Promo.objects.select_related('pricing').get(id=promo_id)
    except (Promo.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Promotion not found.")
    return promo if promo.is_running(now) else None


def price_for(quote: ServiceQuote, stylist: Stylist = None, promo: Promo = None,
              apply_surcharge: bool = True) -> PriceBreakdown:
    """
    base + surcharge, then the promo if it is bound to exactly this
    style + variation:
      percentage -> (base + surcharge) * (1 - pct/100)
      fixed      -> promo_price + surcharge
    """
    surcharge = surcharge_for(stylist, quote.style) if apply_surcharge else Decimal('0.00')
    gross = quote.base_price + surcharge

    if promo is None or not promo.applies_to(quote.style.id, quote.variation.id):
        return PriceBreakdown(
            base_price=quote.base_price, surcharge=surcharge,
            discount=Decimal('0.00'), total=gross,
        )

    if promo.discount_percentage:
        factor = Decimal('1') - promo.discount_percentage / Decimal('100')
        total = (gross * factor).quantize(CENTS, rounding=ROUND_HALF_UP)
    else:
        total = promo.promo_price + surcharge
    total = max(total, Decimal('0.00'))

    return PriceBreakdown(
        base_price=quote.base_price,
        surcharge=surcharge,
        discount=gross - total,
        total=total,
        promo=promo,
    )
