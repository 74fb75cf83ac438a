"""
Payment and Calendar Serializers
"""

from decimal import Decimal
from rest_framework import serializers

from apps.core.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for payments."""

    class Meta:
        model = Payment
        fields = [
            'id',
            'user_id',
            'session_id',
            'amount',
            'currency',
            'status',
            'paypal_order_id',
            'paypal_capture_id',
            'failure_reason',
            'completed_at',
            'created_at',
        ]
        read_only_fields = fields


class CreateOrderSerializer(serializers.Serializer):
    session_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'))


class CaptureOrderSerializer(serializers.Serializer):
    order_id = serializers.CharField(max_length=100)
    session_id = serializers.UUIDField()


class PaymentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payment.Status.choices)


class CalendarEventCreateSerializer(serializers.Serializer):
    session_id = serializers.UUIDField()
