"""
Booking Type and Time Slot Views
"""

import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from shared.common.permissions import IsCoach

from apps.core.services import BookingTypeService, TimeSlotService
from apps.api.serializers import (
    BookingTypeSerializer,
    BookingTypeCreateSerializer,
    BookingTypeUpdateSerializer,
    TimeSlotSerializer,
    TimeSlotCreateSerializer,
    TimeSlotUpdateSerializer,
    TimeSlotFilterSerializer,
)
from .base import BaseSessionViewSet

logger = logging.getLogger(__name__)

COACH_ACTIONS = ['create', 'partial_update', 'destroy', 'mine']


class BookingTypeViewSet(BaseSessionViewSet):
    """
    ViewSet for booking types.

    Anyone authenticated can browse active booking types; only coaches
    manage their own.
    """

    service = BookingTypeService()

    def get_permissions(self):
        if self.action in COACH_ACTIONS:
            return [IsCoach()]
        return super().get_permissions()

    def list(self, request):
        """GET /api/v1/booking-types/"""
        filters = self.get_filters(TimeSlotFilterSerializer)
        booking_types = self.service.find_active(filters.get('coach_id'))
        return Response(BookingTypeSerializer(booking_types, many=True).data)

    def retrieve(self, request, pk=None):
        """GET /api/v1/booking-types/{id}/"""
        booking_type = self.service.get_booking_type(pk)
        return Response(BookingTypeSerializer(booking_type).data)

    def create(self, request):
        """POST /api/v1/booking-types/"""
        data = self.get_validated_data(BookingTypeCreateSerializer)
        booking_type = self.service.create(coach_id=self.get_user_id(), **data)
        return Response(BookingTypeSerializer(booking_type).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        """PATCH /api/v1/booking-types/{id}/"""
        data = self.get_validated_data(BookingTypeUpdateSerializer)
        booking_type = self.service.update(pk, self.get_user_id(), **data)
        return Response(BookingTypeSerializer(booking_type).data)

    def destroy(self, request, pk=None):
        """DELETE /api/v1/booking-types/{id}/"""
        self.service.remove(pk, self.get_user_id())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """GET /api/v1/booking-types/mine/"""
        booking_types = self.service.find_by_coach(self.get_user_id())
        return Response(BookingTypeSerializer(booking_types, many=True).data)


class TimeSlotViewSet(BaseSessionViewSet):
    """
    ViewSet for time slots.
    """

    service = TimeSlotService()

    def get_permissions(self):
        if self.action in COACH_ACTIONS:
            return [IsCoach()]
        return super().get_permissions()

    def list(self, request):
        """
        List available future slots.

        GET /api/v1/time-slots/?coach_id=&start_date=&end_date=
        """
        filters = self.get_filters(TimeSlotFilterSerializer)
        slots = self.service.find_available(**filters)
        return Response(TimeSlotSerializer(slots, many=True).data)

    def create(self, request):
        """POST /api/v1/time-slots/"""
        data = self.get_validated_data(TimeSlotCreateSerializer)
        slot = self.service.create(coach_id=self.get_user_id(), **data)
        return Response(TimeSlotSerializer(slot).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        """PATCH /api/v1/time-slots/{id}/"""
        data = self.get_validated_data(TimeSlotUpdateSerializer)
        slot = self.service.update(pk, self.get_user_id(), **data)
        return Response(TimeSlotSerializer(slot).data)

    def destroy(self, request, pk=None):
        """DELETE /api/v1/time-slots/{id}/"""
        self.service.remove(pk, self.get_user_id())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def mine(self, request):
        """GET /api/v1/time-slots/mine/"""
        filters = self.get_filters(TimeSlotFilterSerializer)
        filters.pop('coach_id', None)
        slots = self.service.find_by_coach(self.get_user_id(), **filters)
        return Response(TimeSlotSerializer(slots, many=True).data)
