from django.contrib import admin
from .models import StyleSurcharge, Stylist


class StyleSurchargeInline(admin.TabularInline):
    model = StyleSurcharge
    extra = 0


@admin.register(Stylist)
class StylistAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'skill_level', 'surcharge', 'surcharge_eligible', 'is_active', 'deleted_at']
    list_filter = ['skill_level', 'is_active', 'surcharge_eligible']
    search_fields = ['full_name', 'email', 'phone']
    list_editable = ['is_active']
    filter_horizontal = ['styles']
    readonly_fields = ['id', 'created_at', 'updated_at', 'deleted_at']
    inlines = [StyleSurchargeInline]
    fieldsets = (
        ('Stylist Info', {'fields': ('id', 'user', 'full_name', 'email', 'phone', 'bio', 'skill_level')}),
        ('Capabilities', {'fields': ('styles',)}),
        ('Surcharge', {'fields': ('surcharge', 'surcharge_eligible')}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at', 'deleted_at'), 'classes': ('collapse',)}),
    )
