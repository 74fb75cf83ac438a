# services/session-service/src/apps/core/services/booking_type_service.py
"""
Booking Type Service
"""

import uuid
import logging
from decimal import Decimal
from typing import List

from django.db import transaction

from apps.core.models import BookingType
from .exceptions import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


class BookingTypeService:
    """Coach-owned catalog of bookable services."""

    UPDATABLE_FIELDS = ('name', 'description', 'base_price', 'is_active')

    def get_booking_type(self, booking_type_id: uuid.UUID) -> BookingType:
        try:
            return BookingType.objects.get(id=booking_type_id)
        except BookingType.DoesNotExist:
            raise NotFoundError("Booking type not found", resource_id=booking_type_id)

    def create(
        self,
        coach_id: uuid.UUID,
        name: str,
        base_price: Decimal,
        description: str = None
    ) -> BookingType:
        booking_type = BookingType.objects.create(
            coach_id=coach_id,
            name=name,
            description=description,
            base_price=base_price,
        )
        logger.info(f"Created booking type {booking_type.id} for coach {coach_id}")
        return booking_type

    def find_active(self, coach_id: uuid.UUID = None) -> List[BookingType]:
        queryset = BookingType.objects.filter(is_active=True)
        if coach_id:
            queryset = queryset.filter(coach_id=coach_id)
        return list(queryset.order_by('name'))

    def find_by_coach(self, coach_id: uuid.UUID) -> List[BookingType]:
        return list(BookingType.objects.filter(coach_id=coach_id).order_by('-created_at'))

    def _get_owned(self, booking_type_id: uuid.UUID, coach_id: uuid.UUID) -> BookingType:
        booking_type = self.get_booking_type(booking_type_id)
        if str(booking_type.coach_id) != str(coach_id):
            raise ForbiddenError("Not authorized to modify this booking type")
        return booking_type

    @transaction.atomic
    def update(self, booking_type_id: uuid.UUID, coach_id: uuid.UUID, **fields) -> BookingType:
        booking_type = self._get_owned(booking_type_id, coach_id)

        changed = [name for name in self.UPDATABLE_FIELDS if fields.get(name) is not None]
        for name in changed:
            setattr(booking_type, name, fields[name])

        if changed:
            booking_type.save(update_fields=changed + ['updated_at'])

        return booking_type

    @transaction.atomic
    def remove(self, booking_type_id: uuid.UUID, coach_id: uuid.UUID) -> BookingType:
        """Soft delete; existing sessions keep their reference."""
        booking_type = self._get_owned(booking_type_id, coach_id)
        booking_type.deactivate()
        logger.info(f"Deactivated booking type {booking_type_id}")
        return booking_type
