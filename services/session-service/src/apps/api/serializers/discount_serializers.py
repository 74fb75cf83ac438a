"""
Discount Serializers
"""

from decimal import Decimal
from rest_framework import serializers

from apps.core.models import Discount


class DiscountSerializer(serializers.ModelSerializer):
    """Serializer for a coach's own discounts."""

    class Meta:
        model = Discount
        fields = [
            'id',
            'code',
            'coach_id',
            'amount',
            'expiry',
            'use_count',
            'max_usage',
            'is_active',
            'created_at',
        ]
        read_only_fields = fields


class DiscountCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    expiry = serializers.DateTimeField()
    max_usage = serializers.IntegerField(min_value=1, default=1)


class DiscountUpdateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.01'), required=False
    )
    expiry = serializers.DateTimeField(required=False)
    max_usage = serializers.IntegerField(min_value=1, required=False)
    is_active = serializers.BooleanField(required=False)


class DiscountValidateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
