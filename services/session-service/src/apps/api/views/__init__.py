"""
Session Service API Views
"""

from .catalog_views import BookingTypeViewSet, TimeSlotViewSet
from .discount_views import DiscountViewSet
from .session_views import SessionViewSet
from .payment_views import PaymentViewSet, CalendarEventViewSet

__all__ = [
    'BookingTypeViewSet',
    'TimeSlotViewSet',
    'DiscountViewSet',
    'SessionViewSet',
    'PaymentViewSet',
    'CalendarEventViewSet',
]
