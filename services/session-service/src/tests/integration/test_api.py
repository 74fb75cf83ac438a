# services/session-service/src/tests/integration/test_api.py
"""
Integration Tests for Session Service API

Tests API endpoints with full request/response cycle.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from shared.common.authentication import generate_access_token
from shared.common.constants import UserRole
from apps.core.models import Discount, Payment, Session, TimeSlot

USER = UserRole.USER.value
COACH = UserRole.COACH.value
ADMIN = UserRole.ADMIN.value


@pytest.mark.django_db
class TestAuthentication:
    """JWT handling at the API boundary."""

    def setup_method(self):
        self.client = APIClient()

    def test_requires_authentication(self):
        response = self.client.get('/api/v1/sessions/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['success'] is False

    def test_bearer_token(self, user_id, create_session):
        create_session()
        token = generate_access_token(user_id, USER)

        response = self.client.get('/api/v1/sessions/', HTTP_AUTHORIZATION=f'Bearer {token}')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1

    def test_invalid_token(self):
        response = self.client.get('/api/v1/sessions/', HTTP_AUTHORIZATION='Bearer not-a-jwt')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestHealthAPI:

    def test_health(self, api_client):
        response = api_client.get('/health/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == 'healthy'

    def test_request_id_echoed(self, api_client):
        response = api_client.get('/health/', HTTP_X_REQUEST_ID='trace-123')

        assert response['X-Request-ID'] == 'trace-123'

    def test_error_envelope_carries_request_id(self, api_client):
        response = api_client.get('/api/v1/sessions/', HTTP_X_REQUEST_ID='trace-456')

        assert response.data['error']['request_id'] == 'trace-456'
        assert response.data['error']['code'] == 'UNAUTHORIZED'

    def test_ready(self, api_client):
        response = api_client.get('/ready/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['checks']['database'] == 'connected'


@pytest.mark.django_db
class TestCatalogAPI:
    """Booking type and time slot endpoints."""

    def test_coach_creates_booking_type(self, authenticate, coach_id):
        client = authenticate(coach_id, COACH)

        response = client.post('/api/v1/booking-types/', {
            'name': 'Career review',
            'base_price': '120.00',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['coach_id'] == str(coach_id)

    def test_client_cannot_create_booking_type(self, authenticate, user_id):
        client = authenticate(user_id, USER)

        response = client.post('/api/v1/booking-types/', {
            'name': 'Nope',
            'base_price': '1.00',
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_available_slots(self, authenticate, user_id, coach_id, create_time_slot):
        create_time_slot()
        create_time_slot(is_available=False)
        client = authenticate(user_id, USER)

        response = client.get('/api/v1/time-slots/', {'coach_id': str(coach_id)})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1

    def test_coach_creates_time_slot(self, authenticate, coach_id):
        client = authenticate(coach_id, COACH)
        start = timezone.now() + timedelta(days=3)

        response = client.post('/api/v1/time-slots/', {
            'date_time': start.isoformat(),
            'duration_min': 30,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['is_available'] is True

    def test_delete_slot_with_active_session(self, authenticate, coach_id, create_session):
        session = create_session()
        client = authenticate(coach_id, COACH)

        response = client.delete(f'/api/v1/time-slots/{session.time_slot_id}/')

        assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.django_db
class TestDiscountAPI:
    """Discount endpoints."""

    def test_validate(self, authenticate, user_id, create_discount):
        create_discount(code='SAVE20', amount=Decimal('20.00'))
        client = authenticate(user_id, USER)

        response = client.post('/api/v1/discounts/validate/', {'code': 'SAVE20'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'code': 'SAVE20', 'amount': '20.00', 'is_valid': True}

    def test_validate_exhausted(self, authenticate, user_id, create_discount):
        create_discount(code='USED', use_count=1, max_usage=1)
        client = authenticate(user_id, USER)

        response = client.post('/api/v1/discounts/validate/', {'code': 'USED'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'DISCOUNT_USAGE_LIMIT'
        assert response.data['error']['message'] == "Discount code usage limit reached"

    def test_validate_unknown(self, authenticate, user_id):
        client = authenticate(user_id, USER)

        response = client.post('/api/v1/discounts/validate/', {'code': 'NOPE'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['code'] == 'INVALID_DISCOUNT_CODE'

    def test_coach_crud(self, authenticate, coach_id):
        client = authenticate(coach_id, COACH)

        response = client.post('/api/v1/discounts/', {
            'code': 'SPRING',
            'amount': '10.00',
            'expiry': (timezone.now() + timedelta(days=7)).isoformat(),
            'max_usage': 10,
        }, format='json')
        assert response.status_code == status.HTTP_201_CREATED

        response = client.patch('/api/v1/discounts/SPRING/', {'amount': '12.50'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount'] == '12.50'

        response = client.delete('/api/v1/discounts/SPRING/')
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert Discount.objects.get(code='SPRING').is_active is False

    def test_other_coach_cannot_delete(self, authenticate, create_discount):
        create_discount(code='THEIRS')
        client = authenticate(uuid.uuid4(), COACH)

        response = client.delete('/api/v1/discounts/THEIRS/')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestSessionAPI:
    """Session endpoints."""

    def test_book_session(self, authenticate, user_id, create_booking_type, create_time_slot, create_discount):
        booking_type = create_booking_type(base_price=Decimal('100.00'))
        slot = create_time_slot()
        create_discount(code='SAVE20', amount=Decimal('20.00'), max_usage=5)
        client = authenticate(user_id, USER)

        response = client.post('/api/v1/sessions/', {
            'booking_type_id': str(booking_type.id),
            'time_slot_id': str(slot.id),
            'discount_code': 'SAVE20',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['price'] == '80.00'
        assert response.data['status'] == Session.Status.SCHEDULED
        assert Discount.objects.get(code='SAVE20').use_count == 1
        assert TimeSlot.objects.get(id=slot.id).is_available is False

    def test_book_taken_slot(self, authenticate, other_user_id, create_session, create_booking_type):
        session = create_session()
        client = authenticate(other_user_id, USER)

        response = client.post('/api/v1/sessions/', {
            'booking_type_id': str(session.booking_type_id),
            'time_slot_id': str(session.time_slot_id),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['message'] == "Time slot not available"

    def test_coach_cannot_book(self, authenticate, coach_id, create_booking_type, create_time_slot):
        client = authenticate(coach_id, COACH)

        response = client.post('/api/v1/sessions/', {
            'booking_type_id': str(create_booking_type().id),
            'time_slot_id': str(create_time_slot().id),
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_retrieve_missing(self, authenticate, user_id):
        client = authenticate(user_id, USER)

        response = client.get(f'/api/v1/sessions/{uuid.uuid4()}/', HTTP_X_REQUEST_ID='trace-789')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['success'] is False
        assert response.data['error']['code'] == 'NOT_FOUND'
        assert response.data['error']['message'] == "Session not found"
        assert response.data['error']['request_id'] == 'trace-789'

    def test_cancel(self, authenticate, user_id, create_session):
        session = create_session()
        client = authenticate(user_id, USER)

        response = client.post(f'/api/v1/sessions/{session.id}/cancel/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == Session.Status.CANCELLED

    def test_cancel_by_other_user(self, authenticate, other_user_id, create_session):
        session = create_session()
        client = authenticate(other_user_id, USER)

        response = client.post(f'/api/v1/sessions/{session.id}/cancel/')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        session.refresh_from_db()
        assert session.status == Session.Status.SCHEDULED

    def test_cancel_with_pending_payment(self, authenticate, user_id, create_session, create_payment):
        session = create_session()
        create_payment(session)
        client = authenticate(user_id, USER)

        response = client.post(f'/api/v1/sessions/{session.id}/cancel/')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_coach_marks_completed(self, authenticate, coach_id, create_session):
        session = create_session()
        client = authenticate(coach_id, COACH)

        response = client.patch(f'/api/v1/sessions/{session.id}/', {'status': 'completed'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'completed'


@pytest.mark.django_db
class TestPaymentAPI:
    """Payment endpoints (FakePaymentGateway configured in testing settings)."""

    def test_create_and_capture(self, authenticate, user_id, create_session):
        session = create_session(price=Decimal('80.00'))
        client = authenticate(user_id, USER)

        response = client.post('/api/v1/payments/create-order/', {
            'session_id': str(session.id),
            'amount': '80.00',
        }, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        order_id = response.data['order_id']
        assert response.data['approval_url']

        response = client.post('/api/v1/payments/capture-order/', {
            'order_id': order_id,
            'session_id': str(session.id),
        }, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['payment_id'] == order_id

        session.refresh_from_db()
        assert session.is_paid is True

        response = client.get('/api/v1/payments/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['status'] == Payment.Status.COMPLETED

    def test_second_order_while_first_pending(self, authenticate, user_id, create_session):
        session = create_session(price=Decimal('80.00'))
        client = authenticate(user_id, USER)
        payload = {'session_id': str(session.id), 'amount': '80.00'}

        first = client.post('/api/v1/payments/create-order/', payload, format='json')
        second = client.post('/api/v1/payments/create-order/', payload, format='json')

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_409_CONFLICT
        assert second.data['error']['message'] == "Payment in progress"
        assert Payment.objects.filter(session=session).count() == 1

    def test_create_order_for_paid_session(self, authenticate, user_id, create_session):
        session = create_session(is_paid=True)
        client = authenticate(user_id, USER)

        response = client.post('/api/v1/payments/create-order/', {
            'session_id': str(session.id),
            'amount': str(session.price),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['message'] == "Session already paid"

    def test_admin_updates_status(self, authenticate, admin_id, create_session, create_payment):
        payment = create_payment(create_session(), status=Payment.Status.COMPLETED)
        client = authenticate(admin_id, ADMIN)

        response = client.patch(f'/api/v1/payments/{payment.id}/status/', {'status': 'refunded'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'refunded'

    def test_non_admin_cannot_update_status(self, authenticate, user_id, create_session, create_payment):
        payment = create_payment(create_session())
        client = authenticate(user_id, USER)

        response = client.patch(f'/api/v1/payments/{payment.id}/status/', {'status': 'refunded'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestCalendarAPI:
    """Calendar event endpoints."""

    def test_create_and_delete_event(self, authenticate, user_id, create_session):
        session = create_session()
        client = authenticate(user_id, USER)

        response = client.post('/api/v1/calendar/events/', {'session_id': str(session.id)}, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        event_id = response.data['event_id']

        response = client.delete(f'/api/v1/calendar/events/{event_id}/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'success': True}

    def test_delete_unknown_event(self, authenticate, user_id):
        client = authenticate(user_id, USER)

        response = client.delete('/api/v1/calendar/events/event_unknown/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error']['message'] == "Event not found"
