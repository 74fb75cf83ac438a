"""
External provider adapters (payment gateway, calendar provider).
"""

from .payment import (
    PaymentGateway,
    PayPalGateway,
    FakePaymentGateway,
    GatewayOrder,
    GatewayCapture,
    get_payment_gateway,
)
from .calendar import (
    CalendarProvider,
    MockCalendarProvider,
    CalendarEvent,
    get_calendar_provider,
)

__all__ = [
    'PaymentGateway',
    'PayPalGateway',
    'FakePaymentGateway',
    'GatewayOrder',
    'GatewayCapture',
    'get_payment_gateway',
    'CalendarProvider',
    'MockCalendarProvider',
    'CalendarEvent',
    'get_calendar_provider',
]
