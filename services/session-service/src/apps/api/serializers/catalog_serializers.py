"""
Booking Type and Time Slot Serializers
"""

from decimal import Decimal
from rest_framework import serializers

from apps.core.models import BookingType, TimeSlot


class BookingTypeSerializer(serializers.ModelSerializer):
    """Serializer for booking types."""

    class Meta:
        model = BookingType
        fields = [
            'id',
            'coach_id',
            'name',
            'description',
            'base_price',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class BookingTypeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    base_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.00')
    )


class BookingTypeUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    base_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.00'), required=False
    )
    is_active = serializers.BooleanField(required=False)


class TimeSlotSerializer(serializers.ModelSerializer):
    """Serializer for time slots."""

    end_time = serializers.DateTimeField(read_only=True)

    class Meta:
        model = TimeSlot
        fields = [
            'id',
            'coach_id',
            'date_time',
            'duration_min',
            'end_time',
            'is_available',
            'created_at',
        ]
        read_only_fields = fields


class TimeSlotCreateSerializer(serializers.Serializer):
    date_time = serializers.DateTimeField()
    duration_min = serializers.IntegerField(min_value=1, default=60)


class TimeSlotUpdateSerializer(serializers.Serializer):
    date_time = serializers.DateTimeField(required=False)
    duration_min = serializers.IntegerField(min_value=1, required=False)
    is_available = serializers.BooleanField(required=False)


class TimeSlotFilterSerializer(serializers.Serializer):
    coach_id = serializers.UUIDField(required=False)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
