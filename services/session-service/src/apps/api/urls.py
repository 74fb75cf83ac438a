"""
Session Service API URL Configuration
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.api.views import (
    BookingTypeViewSet,
    TimeSlotViewSet,
    DiscountViewSet,
    SessionViewSet,
    PaymentViewSet,
    CalendarEventViewSet,
)

app_name = 'api'

router = DefaultRouter()
router.register(r'booking-types', BookingTypeViewSet, basename='booking-type')
router.register(r'time-slots', TimeSlotViewSet, basename='time-slot')
router.register(r'discounts', DiscountViewSet, basename='discount')
router.register(r'sessions', SessionViewSet, basename='session')
router.register(r'payments', PaymentViewSet, basename='payment')
router.register(r'calendar/events', CalendarEventViewSet, basename='calendar-event')

urlpatterns = [
    path('', include(router.urls)),
]

# =============================================================================
# API Endpoint Summary
# =============================================================================
#
# Booking types:
#   GET    /api/v1/booking-types/                 - Active booking types
#   POST   /api/v1/booking-types/                 - Create (coach)
#   GET    /api/v1/booking-types/mine/            - Coach's own
#   PATCH  /api/v1/booking-types/{id}/            - Update (owner)
#   DELETE /api/v1/booking-types/{id}/            - Deactivate (owner)
#
# Time slots:
#   GET    /api/v1/time-slots/                    - Available future slots
#   POST   /api/v1/time-slots/                    - Create (coach)
#   GET    /api/v1/time-slots/mine/               - Coach's own
#   PATCH  /api/v1/time-slots/{id}/               - Update (owner)
#   DELETE /api/v1/time-slots/{id}/               - Delete (owner)
#
# Discounts:
#   GET    /api/v1/discounts/                     - Coach's own
#   POST   /api/v1/discounts/                     - Create (coach)
#   POST   /api/v1/discounts/validate/            - Validate a code
#   PATCH  /api/v1/discounts/{code}/              - Update (owner)
#   DELETE /api/v1/discounts/{code}/              - Deactivate (owner)
#
# Sessions:
#   GET    /api/v1/sessions/                      - Caller's sessions
#   POST   /api/v1/sessions/                      - Book (client)
#   GET    /api/v1/sessions/{id}/                 - Session detail
#   PATCH  /api/v1/sessions/{id}/                 - Update notes / status
#   POST   /api/v1/sessions/{id}/cancel/          - Cancel
#
# Payments:
#   GET    /api/v1/payments/                      - Caller's payments
#   POST   /api/v1/payments/create-order/         - Create gateway order
#   POST   /api/v1/payments/capture-order/        - Capture approved order
#   PATCH  /api/v1/payments/{id}/status/          - Override status (admin)
#
# Calendar:
#   POST   /api/v1/calendar/events/               - Link calendar event
#   DELETE /api/v1/calendar/events/{event_id}/    - Unlink calendar event
