"""
Discount Views
"""

import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from shared.common.permissions import IsCoach

from apps.core.services import DiscountService
from apps.api.serializers import (
    DiscountSerializer,
    DiscountCreateSerializer,
    DiscountUpdateSerializer,
    DiscountValidateSerializer,
)
from .base import BaseSessionViewSet

logger = logging.getLogger(__name__)


class DiscountViewSet(BaseSessionViewSet):
    """
    ViewSet for discount codes, looked up by code.
    """

    lookup_field = 'code'
    lookup_value_regex = '[^/]+'
    service = DiscountService()

    def get_permissions(self):
        if self.action == 'validate':
            return super().get_permissions()
        return [IsCoach()]

    def list(self, request):
        """GET /api/v1/discounts/ - the calling coach's discounts"""
        discounts = self.service.find_by_coach(self.get_user_id())
        return Response(DiscountSerializer(discounts, many=True).data)

    def create(self, request):
        """POST /api/v1/discounts/"""
        data = self.get_validated_data(DiscountCreateSerializer)
        discount = self.service.create(coach_id=self.get_user_id(), **data)
        return Response(DiscountSerializer(discount).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, code=None):
        """PATCH /api/v1/discounts/{code}/"""
        data = self.get_validated_data(DiscountUpdateSerializer)
        discount = self.service.update(code, self.get_user_id(), **data)
        return Response(DiscountSerializer(discount).data)

    def destroy(self, request, code=None):
        """DELETE /api/v1/discounts/{code}/"""
        self.service.remove(code, self.get_user_id())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['post'])
    def validate(self, request):
        """
        Check a code before checkout.

        POST /api/v1/discounts/validate/
        """
        data = self.get_validated_data(DiscountValidateSerializer)
        result = self.service.validate(data['code'])
        return Response({
            'code': result.code,
            'amount': str(result.amount),
            'is_valid': result.is_valid,
        })
