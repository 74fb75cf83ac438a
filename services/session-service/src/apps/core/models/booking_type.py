# services/session-service/src/apps/core/models/booking_type.py
"""
Booking Type Model

Coach-defined service templates that sessions are booked against.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin


class BookingType(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin):
    """
    A bookable service offered by a coach (e.g. "60 min video call").
    """

    coach_id = models.UUIDField(db_index=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    class Meta:
        db_table = 'booking_types'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['coach_id', 'is_active']),
        ]

    def __str__(self):
        return f"{self.name} ({self.base_price})"
