from django.contrib import admin
from .models import BookingType, TimeSlot, Discount, Session, Payment

@admin.register(BookingType)
class BookingTypeAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'coach_id', 'base_price', 'is_active']
    list_filter = ['is_active']

@admin.register(TimeSlot)
class TimeSlotAdmin(admin.ModelAdmin):
    list_display = ['id', 'coach_id', 'date_time', 'duration_min', 'is_available']
    list_filter = ['is_available']

@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = ['code', 'coach_id', 'amount', 'expiry', 'use_count', 'max_usage', 'is_active']
    list_filter = ['is_active']

@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ['id', 'user_id', 'coach_id', 'date_time', 'status', 'price', 'is_paid']
    list_filter = ['status', 'is_paid']

@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['id', 'user_id', 'amount', 'currency', 'status', 'paypal_order_id']
    list_filter = ['status']
