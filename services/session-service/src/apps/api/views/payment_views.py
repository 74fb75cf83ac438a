"""
Payment and Calendar Views
"""

import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from shared.common.permissions import IsAdmin

from apps.core.services import PaymentService, CalendarService
from apps.api.serializers import (
    PaymentSerializer,
    CreateOrderSerializer,
    CaptureOrderSerializer,
    PaymentStatusSerializer,
    CalendarEventCreateSerializer,
)
from .base import BaseSessionViewSet

logger = logging.getLogger(__name__)


class PaymentViewSet(BaseSessionViewSet):
    """
    ViewSet for session payments.
    """

    def get_permissions(self):
        if self.action == 'update_status':
            return [IsAdmin()]
        return super().get_permissions()

    def get_service(self) -> PaymentService:
        return PaymentService()

    def list(self, request):
        """GET /api/v1/payments/ - the caller's payments"""
        payments = self.get_service().find_by_user(self.get_user_id())
        return Response(PaymentSerializer(payments, many=True).data)

    @action(detail=False, methods=['post'], url_path='create-order')
    def create_order(self, request):
        """POST /api/v1/payments/create-order/"""
        data = self.get_validated_data(CreateOrderSerializer)
        result = self.get_service().create_order(
            session_id=data['session_id'],
            amount=data['amount'],
            user_id=self.get_user_id(),
            role=self.get_role(),
        )
        return Response(result, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='capture-order')
    def capture_order(self, request):
        """POST /api/v1/payments/capture-order/"""
        data = self.get_validated_data(CaptureOrderSerializer)
        result = self.get_service().capture_order(
            order_id=data['order_id'],
            session_id=data['session_id'],
            user_id=self.get_user_id(),
            role=self.get_role(),
        )
        return Response(result)

    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk=None):
        """PATCH /api/v1/payments/{id}/status/"""
        data = self.get_validated_data(PaymentStatusSerializer)
        payment = self.get_service().update_status(pk, data['status'], self.get_role())
        return Response(PaymentSerializer(payment).data)


class CalendarEventViewSet(BaseSessionViewSet):
    """
    ViewSet for calendar events linked to sessions.
    """

    lookup_field = 'event_id'
    lookup_value_regex = '[^/]+'

    def get_service(self) -> CalendarService:
        return CalendarService()

    def create(self, request):
        """POST /api/v1/calendar/events/"""
        data = self.get_validated_data(CalendarEventCreateSerializer)
        event = self.get_service().create_event(
            data['session_id'], self.get_user_id(), self.get_role()
        )
        return Response(event, status=status.HTTP_201_CREATED)

    def destroy(self, request, event_id=None):
        """DELETE /api/v1/calendar/events/{event_id}/"""
        result = self.get_service().delete_event(event_id, self.get_user_id(), self.get_role())
        return Response(result)
