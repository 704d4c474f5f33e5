from django.contrib import admin
from .models import BusinessHours, SalonSettings


@admin.register(SalonSettings)
class SalonSettingsAdmin(admin.ModelAdmin):
    list_display = ['name', 'timezone', 'deposit_amount', 'notifications_enabled']
    readonly_fields = ['created_at', 'updated_at']
    fieldsets = (
        ('Salon', {'fields': ('name', 'timezone')}),
        ('Booking Policy', {'fields': ('deposit_amount', 'notifications_enabled')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def has_add_permission(self, request):
        return not SalonSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(BusinessHours)
class BusinessHoursAdmin(admin.ModelAdmin):
    list_display = ['weekday', 'is_open', 'start_time', 'end_time']
    list_editable = ['is_open', 'start_time', 'end_time']
    ordering = ['weekday']
