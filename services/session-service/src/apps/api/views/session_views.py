"""
Session Views

REST API views for booking, reading, updating and cancelling sessions.
"""

import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from shared.common.permissions import IsClient

from apps.core.services import SessionService
from apps.api.serializers import (
    SessionSerializer,
    SessionCreateSerializer,
    SessionUpdateSerializer,
    SessionFilterSerializer,
)
from .base import BaseSessionViewSet

logger = logging.getLogger(__name__)


class SessionViewSet(BaseSessionViewSet):
    """
    ViewSet for coaching sessions.
    """

    service = SessionService()

    def get_permissions(self):
        if self.action == 'create':
            return [IsClient()]
        return super().get_permissions()

    def list(self, request):
        """
        Sessions the caller takes part in.

        GET /api/v1/sessions/?status=&start_date=&end_date=
        """
        filters = self.get_filters(SessionFilterSerializer)
        sessions = self.service.find_by_user(self.get_user_id(), self.get_role(), **filters)
        return Response(SessionSerializer(sessions, many=True).data)

    def retrieve(self, request, pk=None):
        """GET /api/v1/sessions/{id}/"""
        session = self.service.find_one(pk, self.get_user_id(), self.get_role())
        return Response(SessionSerializer(session).data)

    def create(self, request):
        """
        Book a time slot.

        POST /api/v1/sessions/
        """
        data = self.get_validated_data(SessionCreateSerializer)
        session = self.service.create(
            user_id=self.get_user_id(),
            booking_type_id=data['booking_type_id'],
            time_slot_id=data['time_slot_id'],
            discount_code=data.get('discount_code') or None,
            notes=data.get('notes'),
        )
        return Response(SessionSerializer(session).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        """PATCH /api/v1/sessions/{id}/"""
        data = self.get_validated_data(SessionUpdateSerializer)
        session = self.service.update(pk, self.get_user_id(), self.get_role(), **data)
        return Response(SessionSerializer(session).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """POST /api/v1/sessions/{id}/cancel/"""
        session = self.service.cancel(pk, self.get_user_id(), self.get_role())
        return Response(SessionSerializer(session).data)
