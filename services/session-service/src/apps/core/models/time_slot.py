# services/session-service/src/apps/core/models/time_slot.py
"""
Time Slot Model
"""

from datetime import timedelta

from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class TimeSlot(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    A coach-owned bookable interval.

    ``is_available`` is the single source of truth for whether the slot
    can still be booked; it only changes through conditional updates in
    ``TimeSlotService``.
    """

    coach_id = models.UUIDField(db_index=True)
    date_time = models.DateTimeField(db_index=True)
    duration_min = models.PositiveIntegerField(default=60)
    is_available = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'time_slots'
        ordering = ['date_time']
        indexes = [
            models.Index(fields=['coach_id', 'date_time']),
            models.Index(fields=['is_available', 'date_time']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(duration_min__gt=0),
                name='time_slot_positive_duration'
            ),
        ]

    def __str__(self):
        return f"{self.coach_id} @ {self.date_time:%Y-%m-%d %H:%M}"

    @property
    def end_time(self):
        return self.date_time + timedelta(minutes=self.duration_min)

    @property
    def is_past(self) -> bool:
        return self.date_time < timezone.now()
