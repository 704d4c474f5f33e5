"""
Seed management command.

Populates the database with demo salon data:
  - salon settings and business hours (Tue-Sat 09:00-19:00, Sun 10:00-16:00, Mon closed)
  - 3 styles x 3 variations with pricing
  - 3 stylists with style capabilities, one surcharge-eligible
  - 1 running promo

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed
"""
from datetime import time, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.salon.models import BusinessHours, SalonSettings
from apps.styles.models import Pricing, Promo, Style, Variation
from apps.stylists.models import SkillLevel, StyleSurcharge, Stylist


HOURS = {
    0: None,
    1: (time(9, 0), time(19, 0)),
    2: (time(9, 0), time(19, 0)),
    3: (time(9, 0), time(19, 0)),
    4: (time(9, 0), time(19, 0)),
    5: (time(9, 0), time(19, 0)),
    6: (time(10, 0), time(16, 0)),
}

# style -> {variation: (price, duration_minutes)}
PRICING = {
    'Box Braids': {
        'Small':  (Decimal('200.00'), 240),
        'Medium': (Decimal('150.00'), 120),
        'Large':  (Decimal('120.00'), 90),
    },
    'Knotless Braids': {
        'Small':  (Decimal('260.00'), 300),
        'Medium': (Decimal('190.00'), 180),
        'Large':  (Decimal('150.00'), 120),
    },
    'Cornrows': {
        'Small':  (Decimal('90.00'), 90),
        'Medium': (Decimal('70.00'), 60),
        'Large':  (Decimal('50.00'), 30),
    },
}

STYLISTS = [
    {'full_name': 'Amara Okafor', 'skill_level': SkillLevel.EXPERT,
     'surcharge': Decimal('25.00'), 'surcharge_eligible': True,
     'styles': ['Box Braids', 'Knotless Braids', 'Cornrows']},
    {'full_name': 'Jada Williams', 'skill_level': SkillLevel.ADVANCED,
     'surcharge': Decimal('0.00'), 'surcharge_eligible': False,
     'styles': ['Box Braids', 'Cornrows']},
    {'full_name': 'Lena Mensah', 'skill_level': SkillLevel.INTERMEDIATE,
     'surcharge': Decimal('0.00'), 'surcharge_eligible': False,
     'styles': ['Knotless Braids']},
]


class Command(BaseCommand):
    help = 'Seed salon settings, business hours, styles, pricing, stylists and a promo'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete all existing seed data before creating fresh records',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing existing data...')
            Promo.all_objects.all().delete()
            StyleSurcharge.objects.all().delete()
            Stylist.all_objects.all().delete()
            Pricing.objects.all().delete()
            Variation.all_objects.all().delete()
            Style.all_objects.all().delete()

        self.stdout.write('Seeding salon settings...')
        salon = SalonSettings.load()
        salon.name = 'Crown & Coil Braiding Studio'
        salon.save()
        for weekday, hours in HOURS.items():
            BusinessHours.objects.update_or_create(
                weekday=weekday,
                defaults={
                    'is_open': hours is not None,
                    'start_time': hours[0] if hours else time(9, 0),
                    'end_time': hours[1] if hours else time(19, 0),
                },
            )
        self.stdout.write(self.style.SUCCESS('  ✔ business hours for 7 weekdays'))

        # ── Styles & Pricing ──────────────────────────────────────────────────
        self.stdout.write('Seeding styles and pricing...')
        variations = {}
        for order, name in enumerate(['Small', 'Medium', 'Large']):
            variations[name], _ = Variation.objects.get_or_create(
                name=name, defaults={'sort_order': order},
            )

        styles = {}
        for style_name, options_ in PRICING.items():
            styles[style_name], _ = Style.objects.get_or_create(name=style_name)
            for variation_name, (price, duration) in options_.items():
                Pricing.objects.update_or_create(
                    style=styles[style_name], variation=variations[variation_name],
                    defaults={'price': price, 'duration_minutes': duration},
                )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(styles)} styles, {len(variations)} variations'))

        # ── Stylists ──────────────────────────────────────────────────────────
        self.stdout.write('Seeding stylists...')
        for data in STYLISTS:
            stylist, _ = Stylist.objects.update_or_create(
                full_name=data['full_name'],
                defaults={
                    'skill_level': data['skill_level'],
                    'surcharge': data['surcharge'],
                    'surcharge_eligible': data['surcharge_eligible'],
                },
            )
            stylist.styles.set([styles[name] for name in data['styles']])
        amara = Stylist.objects.get(full_name='Amara Okafor')
        StyleSurcharge.objects.update_or_create(
            stylist=amara, style=styles['Knotless Braids'], defaults={'amount': Decimal('40.00')},
        )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(STYLISTS)} stylists'))

        # ── Promo ─────────────────────────────────────────────────────────────
        now = timezone.now()
        Promo.objects.get_or_create(
            pricing=Pricing.objects.get(style=styles['Cornrows'], variation=variations['Medium']),
            title='Cornrow Season',
            defaults={
                'description': '15% off medium cornrows this month.',
                'promo_month': now.month,
                'promo_year': now.year,
                'offer_ends': now + timedelta(days=30),
                'discount_percentage': Decimal('15.00'),
            },
        )
        self.stdout.write(self.style.SUCCESS('  ✔ 1 promo'))

        self.stdout.write(self.style.SUCCESS('\nSeed complete.'))
