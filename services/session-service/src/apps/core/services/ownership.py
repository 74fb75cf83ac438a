# services/session-service/src/apps/core/services/ownership.py
"""
Participant ownership checks.

A session has two participant sides: the requester who booked it and the
provider (coach) who delivers it. Each caller role maps to at most one side,
and each side maps to the model field that identifies it.
"""

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from shared.common.constants import REQUESTER_ROLES, PROVIDER_ROLES

REQUESTER = 'requester'
PROVIDER = 'provider'

PARTICIPANT_FIELDS = {
    REQUESTER: 'user_id',
    PROVIDER: 'coach_id',
}


def participant_side(role: Optional[str]) -> Optional[str]:
    """Resolve a caller role to its participant side, or None."""
    if role in REQUESTER_ROLES:
        return REQUESTER
    if role in PROVIDER_ROLES:
        return PROVIDER
    return None


def is_participant(obj, user_id, role: Optional[str]) -> bool:
    """True when the caller is the participant its role says it is."""
    side = participant_side(role)
    if side is None:
        return False
    return str(getattr(obj, PARTICIPANT_FIELDS[side])) == str(user_id)


def is_requester(obj, user_id, role: Optional[str]) -> bool:
    return participant_side(role) == REQUESTER and is_participant(obj, user_id, role)


def filter_for_participant(queryset: QuerySet, user_id: UUID, role: Optional[str]) -> QuerySet:
    """Restrict a queryset to rows where the caller participates."""
    side = participant_side(role)
    if side is None:
        return queryset.none()
    return queryset.filter(**{PARTICIPANT_FIELDS[side]: user_id})
