from django.contrib import admin, messages

from apps.core.roles import actor_label
from . import ledger
from .exceptions import BookingEngineError
from .models import Booking, BookingStatus, BookingStatusLog


class BookingStatusLogInline(admin.TabularInline):
    model = BookingStatusLog
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        'short_id', 'customer_name', 'style', 'variation', 'stylist',
        'booking_date', 'start_time', 'status', 'price', 'deposit_amount',
    ]
    list_filter = ['status', 'stylist', 'booking_date']
    search_fields = ['customer_name', 'customer_phone', 'customer_email', 'stylist__full_name', 'style__name']
    # Slot, price and status only change through the ledger
    readonly_fields = [
        'id', 'style', 'variation', 'stylist', 'promo',
        'booking_date', 'start_time', 'end_time', 'duration_minutes',
        'price', 'surcharge_amount', 'discount_amount', 'deposit_amount', 'status',
        'access_token', 'created_at', 'updated_at', 'deleted_at',
    ]
    date_hierarchy = 'booking_date'
    inlines = [BookingStatusLogInline]
    actions = ['cancel_bookings']
    fieldsets = (
        ('Booking', {'fields': ('id', 'style', 'variation', 'stylist', 'promo')}),
        ('Customer', {'fields': ('customer', 'customer_name', 'customer_email', 'customer_phone', 'sms_consent')}),
        ('Schedule', {'fields': ('booking_date', 'start_time', 'end_time', 'duration_minutes')}),
        ('Price', {'fields': ('price', 'surcharge_amount', 'discount_amount', 'deposit_amount')}),
        ('Status', {'fields': ('status', 'notes')}),
        ('Access', {'fields': ('access_token',)}),
        ('Audit', {'fields': ('created_at', 'updated_at', 'deleted_at'), 'classes': ('collapse',)}),
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def short_id(self, obj):
        return obj.id_short
    short_id.short_description = 'ID'

    @admin.action(description='Cancel selected bookings')
    def cancel_bookings(self, request, queryset):
        cancelled = 0
        for booking in queryset.exclude(status=BookingStatus.CANCELLED):
            try:
                ledger.transition(booking.id, BookingStatus.CANCELLED, actor_label(request.user), 'Cancelled from admin')
                cancelled += 1
            except BookingEngineError as exc:
                self.message_user(request, f"#{booking.id_short}: {exc}", messages.WARNING)
        self.message_user(request, f"{cancelled} booking(s) cancelled.")


@admin.register(BookingStatusLog)
class BookingStatusLogAdmin(admin.ModelAdmin):
    list_display = ['booking', 'from_status', 'to_status', 'changed_by', 'changed_at']
    readonly_fields = ['id', 'booking', 'from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    search_fields = ['booking__customer_name']
