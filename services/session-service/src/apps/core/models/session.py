# services/session-service/src/apps/core/models/session.py
"""
Session Model

A reservation linking a requester, a coach, a booking type and a time slot.
"""

from datetime import timedelta
from decimal import Decimal

from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class Session(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Coaching session.

    ``date_time``, ``duration_min`` and ``price`` are snapshots taken at
    booking time and do not follow later changes to the slot or booking
    type. Sessions are never hard-deleted.
    """

    class Status(models.TextChoices):
        SCHEDULED = 'scheduled', 'Scheduled'
        CONFIRMED = 'confirmed', 'Confirmed'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'
        NO_SHOW = 'no_show', 'No Show'

    # Allowed status transitions; CANCELLED is terminal
    TRANSITIONS = {
        Status.SCHEDULED.value: {
            Status.CONFIRMED.value, Status.COMPLETED.value,
            Status.CANCELLED.value, Status.NO_SHOW.value,
        },
        Status.CONFIRMED.value: {
            Status.COMPLETED.value, Status.CANCELLED.value, Status.NO_SHOW.value,
        },
    }

    # Participants
    user_id = models.UUIDField(db_index=True)
    coach_id = models.UUIDField(db_index=True)

    # References
    booking_type = models.ForeignKey(
        'core.BookingType',
        on_delete=models.PROTECT,
        related_name='sessions'
    )
    time_slot = models.ForeignKey(
        'core.TimeSlot',
        on_delete=models.PROTECT,
        related_name='sessions'
    )
    discount = models.ForeignKey(
        'core.Discount',
        on_delete=models.PROTECT,
        related_name='sessions',
        blank=True,
        null=True
    )
    discount_code = models.CharField(max_length=50, blank=True, null=True)

    # Snapshot
    date_time = models.DateTimeField(db_index=True)
    duration_min = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2)

    # State
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.SCHEDULED,
        db_index=True
    )
    is_paid = models.BooleanField(default=False)
    payment_id = models.CharField(max_length=100, blank=True, null=True)
    calendar_event_id = models.CharField(max_length=100, blank=True, null=True, unique=True)

    notes = models.TextField(blank=True, null=True)
    cancelled_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'coaching_sessions'
        ordering = ['-date_time']
        indexes = [
            models.Index(fields=['user_id', 'status']),
            models.Index(fields=['coach_id', 'date_time']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=Decimal('0.00')),
                name='session_price_non_negative'
            ),
        ]

    def __str__(self):
        return f"Session {self.id} [{self.status}] {self.date_time:%Y-%m-%d %H:%M}"

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def end_time(self):
        return self.date_time + timedelta(minutes=self.duration_min)

    @property
    def is_past(self) -> bool:
        return self.date_time < timezone.now()

    @property
    def is_cancelled(self) -> bool:
        return self.status == self.Status.CANCELLED

    def can_transition_to(self, status: str) -> bool:
        return str(status) in self.TRANSITIONS.get(str(self.status), set())
