"""
Session Serializers
"""

from rest_framework import serializers

from apps.core.models import Session


class SessionSerializer(serializers.ModelSerializer):
    """Serializer for sessions."""

    booking_type_name = serializers.CharField(source='booking_type.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    end_time = serializers.DateTimeField(read_only=True)

    class Meta:
        model = Session
        fields = [
            'id',
            'user_id',
            'coach_id',
            'booking_type_id',
            'booking_type_name',
            'time_slot_id',
            'discount_code',
            'date_time',
            'duration_min',
            'end_time',
            'price',
            'is_paid',
            'status',
            'status_display',
            'payment_id',
            'calendar_event_id',
            'notes',
            'cancelled_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class SessionCreateSerializer(serializers.Serializer):
    booking_type_id = serializers.UUIDField()
    time_slot_id = serializers.UUIDField()
    discount_code = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class SessionUpdateSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Session.Status.choices, required=False)


class SessionFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Session.Status.choices, required=False)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
