"""
Session Service Business Logic
"""

from .exceptions import (
    SessionServiceError,
    BadRequestError,
    InvalidOrExpiredCodeError,
    UsageLimitReachedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    PaymentGatewayError,
)
from .pricing import calculate_price
from .discount_service import DiscountService, ValidationResult
from .time_slot_service import TimeSlotService
from .booking_type_service import BookingTypeService
from .session_service import SessionService
from .payment_service import PaymentService
from .calendar_service import CalendarService

__all__ = [
    # Services
    'DiscountService',
    'TimeSlotService',
    'BookingTypeService',
    'SessionService',
    'PaymentService',
    'CalendarService',
    'calculate_price',
    'ValidationResult',

    # Exceptions
    'SessionServiceError',
    'BadRequestError',
    'InvalidOrExpiredCodeError',
    'UsageLimitReachedError',
    'ForbiddenError',
    'NotFoundError',
    'ConflictError',
    'PaymentGatewayError',
]
