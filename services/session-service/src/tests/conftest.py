# services/session-service/src/tests/conftest.py
"""
Pytest Configuration and Fixtures

Provides common fixtures for session service tests.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from shared.common.authentication import TokenUser
from shared.common.constants import UserRole


@pytest.fixture
def api_client():
    """Provide API client for testing."""
    return APIClient()


@pytest.fixture
def user_id():
    """Provide a test client (requester) ID."""
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    """Provide a second client ID."""
    return uuid.uuid4()


@pytest.fixture
def coach_id():
    """Provide a test coach ID."""
    return uuid.uuid4()


@pytest.fixture
def admin_id():
    """Provide a test administrator ID."""
    return uuid.uuid4()


@pytest.fixture
def make_token_user():
    """Factory for authenticated JWT users."""

    def _make(user_id, role=UserRole.USER.value, **claims):
        payload = {'sub': str(user_id), 'role': role}
        payload.update(claims)
        return TokenUser(payload)

    return _make


@pytest.fixture
def authenticate(api_client, make_token_user):
    """Authenticate the API client as the given user and role."""

    def _authenticate(user_id, role=UserRole.USER.value):
        api_client.force_authenticate(user=make_token_user(user_id, role))
        return api_client

    return _authenticate


@pytest.fixture
def fake_gateway():
    """Deterministic payment gateway."""
    from apps.core.gateways import FakePaymentGateway
    return FakePaymentGateway()


@pytest.fixture
def create_booking_type(coach_id):
    """Factory fixture for creating booking types."""
    from apps.core.models import BookingType

    def _create_booking_type(**kwargs):
        defaults = {
            'coach_id': coach_id,
            'name': '60 min coaching call',
            'description': 'One-on-one video session',
            'base_price': Decimal('100.00'),
        }
        defaults.update(kwargs)

        return BookingType.objects.create(**defaults)

    return _create_booking_type


@pytest.fixture
def create_time_slot(coach_id):
    """Factory fixture for creating time slots."""
    from apps.core.models import TimeSlot

    def _create_time_slot(**kwargs):
        start = (timezone.now() + timedelta(days=2)).replace(minute=0, second=0, microsecond=0)
        defaults = {
            'coach_id': coach_id,
            'date_time': start,
            'duration_min': 60,
        }
        defaults.update(kwargs)

        return TimeSlot.objects.create(**defaults)

    return _create_time_slot


@pytest.fixture
def create_discount(coach_id):
    """Factory fixture for creating discounts."""
    from apps.core.models import Discount

    def _create_discount(**kwargs):
        defaults = {
            'coach_id': coach_id,
            'code': f"CODE{uuid.uuid4().hex[:6].upper()}",
            'amount': Decimal('20.00'),
            'expiry': timezone.now() + timedelta(days=30),
            'max_usage': 5,
        }
        defaults.update(kwargs)

        return Discount.objects.create(**defaults)

    return _create_discount


@pytest.fixture
def create_session(user_id, coach_id, create_booking_type, create_time_slot):
    """
    Factory fixture for creating sessions directly, with the slot claimed
    the way a booking would claim it.
    """
    from apps.core.models import Session

    def _create_session(**kwargs):
        booking_type = kwargs.pop('booking_type', None) or create_booking_type()
        slot = kwargs.pop('time_slot', None) or create_time_slot(
            date_time=kwargs.get('date_time', timezone.now() + timedelta(days=2))
        )
        slot.is_available = False
        slot.save(update_fields=['is_available'])

        defaults = {
            'user_id': user_id,
            'coach_id': coach_id,
            'booking_type': booking_type,
            'time_slot': slot,
            'date_time': slot.date_time,
            'duration_min': slot.duration_min,
            'price': booking_type.base_price,
            'status': Session.Status.SCHEDULED,
        }
        defaults.update(kwargs)

        return Session.objects.create(**defaults)

    return _create_session


@pytest.fixture
def create_payment(user_id):
    """Factory fixture for creating payments."""
    from apps.core.models import Payment

    def _create_payment(session, **kwargs):
        defaults = {
            'user_id': user_id,
            'session': session,
            'amount': session.price,
            'currency': 'USD',
            'status': Payment.Status.PENDING,
            'paypal_order_id': f"ORDER-{uuid.uuid4().hex[:10].upper()}",
        }
        defaults.update(kwargs)

        return Payment.objects.create(**defaults)

    return _create_payment
