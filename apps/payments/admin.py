from django.contrib import admin
from .models import Payment, PaymentIntent


@admin.register(PaymentIntent)
class PaymentIntentAdmin(admin.ModelAdmin):
    list_display = [
        'gateway_order_id', 'purpose', 'amount', 'currency', 'status', 'booking', 'created_at'
    ]
    list_filter = ['status', 'purpose', 'currency']
    search_fields = ['gateway_order_id', 'booking__customer_name']
    readonly_fields = [
        'id', 'gateway_order_id', 'amount_minor_units', 'confirmed_at', 'consumed_at',
        'failure_reason', 'created_at', 'updated_at',
    ]
    fieldsets = (
        ('Intent', {'fields': ('id', 'purpose', 'status', 'booking')}),
        ('Amounts', {'fields': ('amount', 'amount_minor_units', 'deposit_amount', 'processing_fee', 'currency')}),
        ('Gateway', {'fields': ('gateway_order_id', 'confirmed_at', 'consumed_at', 'failure_reason')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['booking', 'amount', 'method', 'is_deposit', 'gateway_ref', 'paid_at']
    list_filter = ['method', 'is_deposit']
    search_fields = ['gateway_ref', 'booking__customer_name']
    readonly_fields = ['id', 'created_at', 'updated_at']
