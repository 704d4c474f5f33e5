from django.contrib import admin
from .models import Pricing, Promo, Style, Variation


class PricingInline(admin.TabularInline):
    model = Pricing
    extra = 1


@admin.register(Style)
class StyleAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'deleted_at']
    list_filter = ['is_active']
    search_fields = ['name']
    list_editable = ['is_active']
    readonly_fields = ['id', 'created_at', 'updated_at', 'deleted_at']
    inlines = [PricingInline]
    fieldsets = (
        ('Style Info', {'fields': ('id', 'name', 'description')}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at', 'deleted_at'), 'classes': ('collapse',)}),
    )


@admin.register(Variation)
class VariationAdmin(admin.ModelAdmin):
    list_display = ['name', 'sort_order']
    list_editable = ['sort_order']
    search_fields = ['name']


@admin.register(Pricing)
class PricingAdmin(admin.ModelAdmin):
    list_display = ['style', 'variation', 'price', 'duration_minutes']
    list_filter = ['style', 'variation']
    list_editable = ['price', 'duration_minutes']


@admin.register(Promo)
class PromoAdmin(admin.ModelAdmin):
    list_display = ['title', 'pricing', 'promo_month', 'promo_year', 'discount_percentage', 'promo_price', 'offer_ends', 'is_active']
    list_filter = ['is_active', 'promo_year', 'promo_month']
    search_fields = ['title', 'pricing__style__name']
    readonly_fields = ['id', 'created_at', 'updated_at', 'deleted_at']
