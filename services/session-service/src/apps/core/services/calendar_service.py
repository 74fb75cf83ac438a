# services/session-service/src/apps/core/services/calendar_service.py
"""
Calendar Service

Links sessions to external calendar events.
"""

import uuid
import logging
from typing import Any, Dict

from django.db import transaction

from apps.core.events import EventType, event_publisher
from apps.core.models import Session
from .exceptions import BadRequestError, NotFoundError
from .session_service import SessionService

logger = logging.getLogger(__name__)


class CalendarService:
    """Create and delete the calendar event attached to a session."""

    def __init__(self, provider=None, sessions: SessionService = None):
        if provider is None:
            from apps.core.gateways import get_calendar_provider
            provider = get_calendar_provider()
        self.provider = provider
        self.sessions = sessions or SessionService()

    def _summary(self, session: Session, event_id: str) -> Dict[str, Any]:
        from apps.core.gateways import CalendarEvent

        return CalendarEvent(
            event_id=event_id,
            summary=f"{session.booking_type.name} session",
            start=session.date_time,
            end=session.end_time,
            attendees=[str(session.user_id), str(session.coach_id)],
        ).to_dict()

    @transaction.atomic
    def create_event(self, session_id: uuid.UUID, user_id: uuid.UUID, role: str) -> Dict[str, Any]:
        """
        Attach a calendar event to a session.

        Calling again for a session that already has an event returns the
        existing event rather than creating a second one.
        """
        try:
            session = self.sessions.get_session(session_id)
        except NotFoundError:
            raise BadRequestError("Session not found", field="session_id")

        self.sessions.authorize(session, user_id, role)

        if session.is_cancelled:
            raise BadRequestError("Cannot add a cancelled session to the calendar")

        if session.calendar_event_id:
            return self._summary(session, session.calendar_event_id)

        event_id = self.provider.create_event(
            summary=f"{session.booking_type.name} session",
            start=session.date_time,
            end=session.end_time,
            attendees=[str(session.user_id), str(session.coach_id)],
        )

        updated = Session.objects.filter(
            id=session.id, calendar_event_id__isnull=True
        ).update(calendar_event_id=event_id)

        if not updated:
            # Another request linked an event first; keep theirs
            self.provider.delete_event(event_id)
            session.refresh_from_db(fields=['calendar_event_id'])
            return self._summary(session, session.calendar_event_id)

        session.calendar_event_id = event_id
        logger.info(f"Linked calendar event {event_id} to session {session.id}")
        event_publisher.publish(EventType.CALENDAR_EVENT_CREATED, {
            'session_id': session.id,
            'event_id': event_id,
        })
        return self._summary(session, event_id)

    @transaction.atomic
    def delete_event(self, event_id: str, user_id: uuid.UUID, role: str) -> Dict[str, Any]:
        session = self.sessions.find_by_calendar_event(event_id)
        if session is None:
            raise BadRequestError("Event not found", field="event_id")

        self.sessions.authorize(session, user_id, role)

        self.provider.delete_event(event_id)
        Session.objects.filter(id=session.id, calendar_event_id=event_id).update(
            calendar_event_id=None
        )

        logger.info(f"Unlinked calendar event {event_id} from session {session.id}")
        event_publisher.publish(EventType.CALENDAR_EVENT_DELETED, {
            'session_id': session.id,
            'event_id': event_id,
        })
        return {'success': True}
