"""
Stylist models: Stylist profile and per-style surcharge overrides.
Only active stylists capable of the requested style are ever assigned.
"""
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel, UUIDModel
from apps.styles.models import Style


class SkillLevel(models.TextChoices):
    BEGINNER     = 'BEGINNER',     'Beginner'
    INTERMEDIATE = 'INTERMEDIATE', 'Intermediate'
    ADVANCED     = 'ADVANCED',     'Advanced'
    EXPERT       = 'EXPERT',       'Expert'


class Stylist(BaseModel):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='stylist_profile',
    )
    full_name = models.CharField(max_length=120)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    bio = models.TextField(blank=True)
    skill_level = models.CharField(
        max_length=20, choices=SkillLevel.choices, default=SkillLevel.INTERMEDIATE,
    )
    styles = models.ManyToManyField(Style, related_name='stylists', blank=True)
    surcharge = models.DecimalField(
        max_digits=8, decimal_places=2, default=0,
        validators=[MinValueValidator(0)],
        help_text='Base surcharge added to every style this stylist performs.',
    )
    surcharge_eligible = models.BooleanField(
        default=False,
        help_text='Surcharges (base or per-style) only apply when this is set.',
    )
    is_active = models.BooleanField(default=True, db_index=True)

    @property
    def first_name(self):
        return self.full_name.split()[0] if self.full_name else ""

    class Meta:
        verbose_name = 'Stylist'
        verbose_name_plural = 'Stylists'
        ordering = ['full_name']

    def __str__(self):
        return f"{self.full_name} ({self.get_skill_level_display()})"


class StyleSurcharge(UUIDModel):
    """Overrides the stylist's base surcharge for one style."""
    stylist = models.ForeignKey(
        Stylist,
        on_delete=models.CASCADE,
        related_name='style_surcharges',
    )
    style = models.ForeignKey(
        Style,
        on_delete=models.CASCADE,
        related_name='stylist_surcharges',
    )
    amount = models.DecimalField(
        max_digits=8, decimal_places=2,
        validators=[MinValueValidator(0)],
    )

    class Meta:
        verbose_name = 'Style Surcharge'
        verbose_name_plural = 'Style Surcharges'
        unique_together = [('stylist', 'style')]
        ordering = ['stylist', 'style']

    def __str__(self):
        return f"{self.stylist.full_name} - {self.style.name}: +${self.amount}"
