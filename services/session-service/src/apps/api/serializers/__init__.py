"""
Session Service API Serializers
"""

from .catalog_serializers import (
    BookingTypeSerializer,
    BookingTypeCreateSerializer,
    BookingTypeUpdateSerializer,
    TimeSlotSerializer,
    TimeSlotCreateSerializer,
    TimeSlotUpdateSerializer,
    TimeSlotFilterSerializer,
)
from .discount_serializers import (
    DiscountSerializer,
    DiscountCreateSerializer,
    DiscountUpdateSerializer,
    DiscountValidateSerializer,
)
from .session_serializers import (
    SessionSerializer,
    SessionCreateSerializer,
    SessionUpdateSerializer,
    SessionFilterSerializer,
)
from .payment_serializers import (
    PaymentSerializer,
    CreateOrderSerializer,
    CaptureOrderSerializer,
    PaymentStatusSerializer,
    CalendarEventCreateSerializer,
)

__all__ = [
    'BookingTypeSerializer',
    'BookingTypeCreateSerializer',
    'BookingTypeUpdateSerializer',
    'TimeSlotSerializer',
    'TimeSlotCreateSerializer',
    'TimeSlotUpdateSerializer',
    'TimeSlotFilterSerializer',
    'DiscountSerializer',
    'DiscountCreateSerializer',
    'DiscountUpdateSerializer',
    'DiscountValidateSerializer',
    'SessionSerializer',
    'SessionCreateSerializer',
    'SessionUpdateSerializer',
    'SessionFilterSerializer',
    'PaymentSerializer',
    'CreateOrderSerializer',
    'CaptureOrderSerializer',
    'PaymentStatusSerializer',
    'CalendarEventCreateSerializer',
]
