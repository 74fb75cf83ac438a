"""
Session Service Models
"""

from .booking_type import BookingType
from .time_slot import TimeSlot
from .discount import Discount
from .session import Session
from .payment import Payment

__all__ = [
    'BookingType',
    'TimeSlot',
    'Discount',
    'Session',
    'Payment',
]
