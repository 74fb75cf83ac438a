# services/session-service/src/apps/core/events.py
"""
Session Service Events

Event definitions and publishing for the session service.
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

from django.conf import settings

logger = logging.getLogger(__name__)


class EventType:
    """Event type constants for session service."""

    # Session lifecycle events
    SESSION_CREATED = 'session.created'
    SESSION_UPDATED = 'session.updated'
    SESSION_CANCELLED = 'session.cancelled'

    # Payment events
    PAYMENT_ORDER_CREATED = 'payment.order_created'
    PAYMENT_COMPLETED = 'payment.completed'
    PAYMENT_FAILED = 'payment.failed'
    PAYMENT_STATUS_OVERRIDDEN = 'payment.status_overridden'
    PAYMENT_REFUND_REQUIRED = 'payment.refund_required'

    # Calendar events
    CALENDAR_EVENT_CREATED = 'calendar.event_created'
    CALENDAR_EVENT_DELETED = 'calendar.event_deleted'


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for event payloads."""

    def default(self, obj):
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            return str(obj)
        return super().default(obj)


class EventPublisher:
    """
    Event publisher for session service.

    Events are written as structured log records for downstream shipping.
    """

    def __init__(self):
        self.service_name = getattr(settings, 'SERVICE_NAME', 'session-service')
        self.enabled = getattr(settings, 'EVENT_PUBLISHING_ENABLED', True)

    def publish(
        self,
        event_type: str,
        payload: Dict[str, Any],
        correlation_id: str = None
    ) -> bool:
        """
        Publish an event.

        Returns:
            True if published, False if publishing is disabled or the
            payload could not be serialized
        """
        if not self.enabled:
            logger.debug(f"Event publishing disabled, skipping: {event_type}")
            return False

        event = {
            'event_type': event_type,
            'service': self.service_name,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'correlation_id': correlation_id,
            'payload': payload,
        }

        try:
            event_json = json.dumps(event, cls=JSONEncoder)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize event {event_type}: {e}")
            return False

        logger.info(f"Publishing event: {event_type}", extra={
            'event_type': event_type,
            'event': event_json,
        })
        return True


# Global publisher instance
event_publisher = EventPublisher()


def publish_session_event(event_type: str, session) -> bool:
    return event_publisher.publish(event_type, {
        'session_id': session.id,
        'user_id': session.user_id,
        'coach_id': session.coach_id,
        'status': session.status,
        'date_time': session.date_time,
        'price': session.price,
        'is_paid': session.is_paid,
    })


def publish_payment_event(event_type: str, payment) -> bool:
    return event_publisher.publish(event_type, {
        'payment_id': payment.id,
        'session_id': payment.session_id,
        'user_id': payment.user_id,
        'amount': payment.amount,
        'currency': payment.currency,
        'status': payment.status,
        'paypal_order_id': payment.paypal_order_id,
    })
