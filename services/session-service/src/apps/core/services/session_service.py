# services/session-service/src/apps/core/services/session_service.py
"""
Session Service

Booking creation, participant-gated reads and updates, and cancellation.
"""

import uuid
import logging
from datetime import datetime
from typing import Optional, List

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.core.events import EventType, publish_session_event
from apps.core.models import BookingType, Payment, Session
from .discount_service import DiscountService
from .exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from .ownership import (
    PROVIDER,
    filter_for_participant,
    is_participant,
    participant_side,
)
from .pricing import calculate_price, ZERO
from .time_slot_service import TimeSlotService

logger = logging.getLogger(__name__)


class SessionService:
    """
    Service for coaching sessions.

    Handles:
    - Booking (slot claim, discount claim, price snapshot)
    - Participant-gated reads and updates
    - Cancellation with slot release
    """

    def __init__(
        self,
        time_slots: TimeSlotService = None,
        discounts: DiscountService = None
    ):
        self.time_slots = time_slots or TimeSlotService()
        self.discounts = discounts or DiscountService()

    # ==========================================================================
    # Booking
    # ==========================================================================

    @transaction.atomic
    def create(
        self,
        user_id: uuid.UUID,
        booking_type_id: uuid.UUID,
        time_slot_id: uuid.UUID,
        discount_code: str = None,
        notes: str = None
    ) -> Session:
        """
        Book a time slot.

        The slot and the discount use are both claimed with conditional
        updates inside this transaction, so a failed booking consumes
        neither.
        """
        # 1. Pending booking cap
        max_pending = getattr(settings, 'MAX_PENDING_BOOKINGS', 3)
        pending = Session.objects.filter(
            user_id=user_id,
            status=Session.Status.SCHEDULED,
            is_paid=False,
        ).count()
        if pending >= max_pending:
            raise BadRequestError(
                f"Maximum of {max_pending} pending bookings reached",
                details={'pending_bookings': pending}
            )

        # 2. Booking type
        booking_type = BookingType.objects.filter(id=booking_type_id, is_active=True).first()
        if booking_type is None:
            raise BadRequestError("Invalid booking type", field="booking_type_id")

        # 3. Time slot
        slot = self.time_slots.find_available_by_id(time_slot_id)
        if slot is None:
            raise BadRequestError("Time slot not available", field="time_slot_id")

        if not self.time_slots.claim(slot.id):
            raise ConflictError(
                "Time slot already booked",
                details={'time_slot_id': str(slot.id)}
            )

        # 4. Discount (an unusable code falls back to full price)
        discount = None
        if discount_code:
            candidate = self.discounts.find_usable(discount_code)
            if candidate is not None and self.discounts.consume(discount_code):
                discount = candidate
            else:
                logger.info(f"Ignoring unusable discount code {discount_code}")

        price = calculate_price(booking_type.base_price, discount)
        is_free = price <= ZERO

        # 5. Persist
        session = Session.objects.create(
            user_id=user_id,
            coach_id=booking_type.coach_id,
            booking_type=booking_type,
            time_slot=slot,
            discount=discount,
            discount_code=discount.code if discount else None,
            date_time=slot.date_time,
            duration_min=slot.duration_min,
            price=price,
            is_paid=is_free,
            status=Session.Status.CONFIRMED if is_free else Session.Status.SCHEDULED,
            notes=notes,
        )

        logger.info(
            f"Created session {session.id} for user {user_id} "
            f"at {slot.date_time.strftime('%Y-%m-%d %H:%M')}",
            extra={'price': str(price), 'discount_code': session.discount_code}
        )

        transaction.on_commit(lambda: publish_session_event(EventType.SESSION_CREATED, session))
        return session

    # ==========================================================================
    # Reads
    # ==========================================================================

    def get_session(self, session_id: uuid.UUID) -> Session:
        try:
            return Session.objects.select_related('booking_type', 'time_slot').get(id=session_id)
        except Session.DoesNotExist:
            raise NotFoundError("Session not found", resource_id=session_id)

    def authorize(self, session: Session, user_id: uuid.UUID, role: str) -> Session:
        if not is_participant(session, user_id, role):
            raise ForbiddenError("Not authorized to access this session")
        return session

    def find_one(self, session_id: uuid.UUID, user_id: uuid.UUID, role: str) -> Session:
        return self.authorize(self.get_session(session_id), user_id, role)

    def find_by_user(
        self,
        user_id: uuid.UUID,
        role: str,
        status: str = None,
        start_date: datetime = None,
        end_date: datetime = None
    ) -> List[Session]:
        """Sessions the caller participates in, newest first."""
        queryset = filter_for_participant(
            Session.objects.select_related('booking_type'), user_id, role
        )

        if status:
            queryset = queryset.filter(status=status)
        if start_date:
            queryset = queryset.filter(date_time__gte=start_date)
        if end_date:
            queryset = queryset.filter(date_time__lte=end_date)

        return list(queryset.order_by('-date_time'))

    def find_by_calendar_event(self, event_id: str) -> Optional[Session]:
        if not event_id:
            return None
        return Session.objects.select_related('booking_type').filter(
            calendar_event_id=event_id
        ).first()

    # ==========================================================================
    # Updates
    # ==========================================================================

    @transaction.atomic
    def update(
        self,
        session_id: uuid.UUID,
        user_id: uuid.UUID,
        role: str,
        notes: str = None,
        status: str = None
    ) -> Session:
        session = self.find_one(session_id, user_id, role)

        if session.is_cancelled:
            raise BadRequestError("Session already cancelled")

        changed = []

        if notes is not None:
            session.notes = notes
            changed.append('notes')

        if status is not None and status != session.status:
            if participant_side(role) != PROVIDER:
                raise ForbiddenError("Only the coach can change the session status")
            if status == Session.Status.CANCELLED:
                raise BadRequestError("Use cancel to cancel a session", field="status")
            if not session.can_transition_to(status):
                raise BadRequestError(
                    f"Cannot transition from {session.status} to {status}",
                    field="status"
                )
            session.status = status
            changed.append('status')

        if changed:
            session.save(update_fields=changed + ['updated_at'])
            logger.info(f"Updated session {session_id}: {', '.join(changed)}")
            transaction.on_commit(lambda: publish_session_event(EventType.SESSION_UPDATED, session))

        return session

    @transaction.atomic
    def cancel(self, session_id: uuid.UUID, user_id: uuid.UUID, role: str) -> Session:
        """
        Cancel a session and release its time slot.

        No refund is issued; completed payments stay as they are.
        """
        session = self.find_one(session_id, user_id, role)

        # Lock the row so a concurrent capture or cancel sees our outcome
        session = Session.objects.select_for_update().get(id=session.id)

        if session.is_cancelled:
            raise BadRequestError("Session already cancelled")

        if session.is_past:
            raise BadRequestError("Cannot cancel past sessions")

        if Payment.objects.in_progress(session).exists():
            raise ConflictError(
                "Payment in progress",
                details={'session_id': str(session.id)}
            )

        session.status = Session.Status.CANCELLED
        session.cancelled_at = timezone.now()
        session.save(update_fields=['status', 'cancelled_at', 'updated_at'])

        self.time_slots.release(session.time_slot_id)

        logger.info(f"Cancelled session {session_id} by {role} {user_id}")
        transaction.on_commit(lambda: publish_session_event(EventType.SESSION_CANCELLED, session))
        return session
