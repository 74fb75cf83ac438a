# services/session-service/src/apps/core/gateways/calendar.py
"""
Calendar Provider Adapters

Only a mock provider exists; it synthesizes event ids locally.
"""

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from django.conf import settings
from django.utils.module_loading import import_string


@dataclass(frozen=True)
class CalendarEvent:
    event_id: str
    summary: str
    start: datetime
    end: datetime
    attendees: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'event_id': self.event_id,
            'summary': self.summary,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'attendees': list(self.attendees),
        }


class CalendarProvider(ABC):

    @abstractmethod
    def create_event(self, summary: str, start: datetime, end: datetime, attendees: List[str]) -> str:
        """Create an event and return its external id."""

    @abstractmethod
    def delete_event(self, event_id: str) -> None:
        ...


class MockCalendarProvider(CalendarProvider):
    """Calendar provider that never leaves the process."""

    def __init__(self):
        self.deleted: List[str] = []

    def create_event(self, summary, start, end, attendees) -> str:
        return f"event_{int(time.time() * 1000)}_{random.randint(0, 999999):06d}"

    def delete_event(self, event_id: str) -> None:
        self.deleted.append(event_id)


def get_calendar_provider() -> CalendarProvider:
    """Instantiate the provider configured in ``CALENDAR_PROVIDER_CLASS``."""
    provider_class = import_string(
        getattr(settings, 'CALENDAR_PROVIDER_CLASS', 'apps.core.gateways.calendar.MockCalendarProvider')
    )
    return provider_class()
