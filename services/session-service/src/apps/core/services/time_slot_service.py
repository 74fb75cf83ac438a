# services/session-service/src/apps/core/services/time_slot_service.py
"""
Time Slot Service

Availability guard and coach-owned slot management.
"""

import uuid
import logging
from datetime import datetime
from typing import Optional, List

from django.db import transaction
from django.utils import timezone

from apps.core.models import TimeSlot, Session
from .exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class TimeSlotService:
    """
    Service for time slots.

    ``claim`` and ``release`` are the only writers of ``is_available``
    during booking, and both are single conditional UPDATEs.
    """

    UPDATABLE_FIELDS = ('date_time', 'duration_min', 'is_available')

    # ==========================================================================
    # Availability guard
    # ==========================================================================

    def find_available_by_id(self, slot_id: uuid.UUID) -> Optional[TimeSlot]:
        return TimeSlot.objects.filter(id=slot_id, is_available=True).first()

    def claim(self, slot_id: uuid.UUID) -> bool:
        """Take the slot; False if someone else already holds it."""
        updated = TimeSlot.objects.filter(id=slot_id, is_available=True).update(
            is_available=False,
            updated_at=timezone.now(),
        )
        return bool(updated)

    def release(self, slot_id: uuid.UUID) -> bool:
        updated = TimeSlot.objects.filter(id=slot_id, is_available=False).update(
            is_available=True,
            updated_at=timezone.now(),
        )
        if updated:
            logger.info(f"Released time slot {slot_id}")
        return bool(updated)

    def mark_unavailable(self, slot_id: uuid.UUID) -> None:
        """Unconditional flag-off; repeated calls are no-ops."""
        TimeSlot.objects.filter(id=slot_id).update(
            is_available=False,
            updated_at=timezone.now(),
        )

    # ==========================================================================
    # Coach CRUD
    # ==========================================================================

    def get_slot(self, slot_id: uuid.UUID) -> TimeSlot:
        try:
            return TimeSlot.objects.get(id=slot_id)
        except TimeSlot.DoesNotExist:
            raise NotFoundError("Time slot not found", resource_id=slot_id)

    def _get_owned(self, slot_id: uuid.UUID, coach_id: uuid.UUID, action: str) -> TimeSlot:
        slot = self.get_slot(slot_id)
        if str(slot.coach_id) != str(coach_id):
            raise ForbiddenError(f"Not authorized to {action} this time slot")
        return slot

    def create(
        self,
        coach_id: uuid.UUID,
        date_time: datetime,
        duration_min: int = 60
    ) -> TimeSlot:
        if date_time <= timezone.now():
            raise BadRequestError("Time slot must be in the future", field="date_time")

        slot = TimeSlot.objects.create(
            coach_id=coach_id,
            date_time=date_time,
            duration_min=duration_min,
        )
        logger.info(f"Created time slot {slot.id} for coach {coach_id}")
        return slot

    @transaction.atomic
    def update(self, slot_id: uuid.UUID, coach_id: uuid.UUID, **fields) -> TimeSlot:
        slot = self._get_owned(slot_id, coach_id, 'update')

        if self._has_active_sessions(slot):
            raise ConflictError("Time slot has an active session")

        changed = []
        for name in self.UPDATABLE_FIELDS:
            if name in fields and fields[name] is not None:
                setattr(slot, name, fields[name])
                changed.append(name)

        if changed:
            slot.save(update_fields=changed + ['updated_at'])

        return slot

    @transaction.atomic
    def remove(self, slot_id: uuid.UUID, coach_id: uuid.UUID) -> None:
        slot = self._get_owned(slot_id, coach_id, 'delete')

        if self._has_active_sessions(slot):
            raise ConflictError(
                "Cannot delete a time slot with an active session",
                details={'time_slot_id': str(slot_id)}
            )

        if slot.sessions.exists():
            # Cancelled sessions still reference the slot; keep the row
            slot.is_available = False
            slot.save(update_fields=['is_available', 'updated_at'])
        else:
            slot.delete()

        logger.info(f"Removed time slot {slot_id}")

    def find_available(
        self,
        start_date: datetime = None,
        end_date: datetime = None,
        coach_id: uuid.UUID = None
    ) -> List[TimeSlot]:
        queryset = TimeSlot.objects.filter(
            is_available=True,
            date_time__gte=start_date or timezone.now(),
        )
        if end_date:
            queryset = queryset.filter(date_time__lte=end_date)
        if coach_id:
            queryset = queryset.filter(coach_id=coach_id)
        return list(queryset.order_by('date_time'))

    def find_by_coach(
        self,
        coach_id: uuid.UUID,
        start_date: datetime = None,
        end_date: datetime = None
    ) -> List[TimeSlot]:
        queryset = TimeSlot.objects.filter(coach_id=coach_id)
        if start_date:
            queryset = queryset.filter(date_time__gte=start_date)
        if end_date:
            queryset = queryset.filter(date_time__lte=end_date)
        return list(queryset.order_by('date_time'))

    @staticmethod
    def _has_active_sessions(slot: TimeSlot) -> bool:
        return slot.sessions.exclude(status=Session.Status.CANCELLED).exists()
