# services/session-service/src/tests/unit/test_gateways.py
"""
Unit Tests for the PayPal gateway adapter

HTTP traffic is intercepted with respx.
"""

import json
from unittest.mock import patch
from decimal import Decimal

import httpx
import pytest
import respx

from apps.core.gateways import PayPalGateway, GatewayCapture
from apps.core.services import PaymentGatewayError
from shared.common.clients import CircuitBreaker

BASE = 'https://api-m.sandbox.paypal.com'


def mock_token():
    return respx.post(f"{BASE}/v1/oauth2/token").respond(
        200, json={'access_token': 'A21AA-token', 'token_type': 'Bearer', 'expires_in': 32400}
    )


@pytest.fixture
def gateway():
    return PayPalGateway(client_id='client', client_secret='secret', environment='sandbox', timeout=2)


class TestPayPalGateway:

    @respx.mock
    def test_access_token_uses_client_credentials(self, gateway):
        route = mock_token()

        assert gateway.get_access_token() == 'A21AA-token'

        request = route.calls.last.request
        assert request.headers['Authorization'].startswith('Basic ')
        assert b'grant_type=client_credentials' in request.content

    @respx.mock
    def test_create_order(self, gateway):
        mock_token()
        route = respx.post(f"{BASE}/v2/checkout/orders").respond(201, json={
            'id': '5O190127TN364715T',
            'status': 'CREATED',
            'links': [
                {'href': f"{BASE}/v2/checkout/orders/5O190127TN364715T", 'rel': 'self'},
                {'href': 'https://www.sandbox.paypal.com/checkoutnow?token=5O190127TN364715T', 'rel': 'approve'},
            ],
        })

        order = gateway.create_order(
            amount=Decimal('80'),
            currency='USD',
            description='60 min coaching call',
            return_url='http://app/payment/success',
            cancel_url='http://app/payment/cancel',
        )

        assert order.id == '5O190127TN364715T'
        assert order.approval_url.endswith('token=5O190127TN364715T')

        request = route.calls.last.request
        body = json.loads(request.content)
        assert request.headers['Authorization'] == 'Bearer A21AA-token'
        assert body['intent'] == 'CAPTURE'
        assert body['purchase_units'][0]['amount'] == {'currency_code': 'USD', 'value': '80.00'}
        assert body['application_context']['return_url'] == 'http://app/payment/success'

    @respx.mock
    def test_create_order_without_approve_link(self, gateway):
        mock_token()
        respx.post(f"{BASE}/v2/checkout/orders").respond(201, json={'id': 'X', 'links': []})

        with pytest.raises(PaymentGatewayError):
            gateway.create_order(Decimal('10'), 'USD', 'desc', 'http://r', 'http://c')

    @respx.mock
    def test_capture_completed(self, gateway):
        mock_token()
        respx.post(f"{BASE}/v2/checkout/orders/ORDER1/capture").respond(201, json={
            'id': 'ORDER1',
            'status': 'COMPLETED',
            'purchase_units': [{'payments': {'captures': [{'id': '3C679366HH908993F', 'status': 'COMPLETED'}]}}],
        })

        capture = gateway.capture_order('ORDER1')

        assert isinstance(capture, GatewayCapture)
        assert capture.is_completed
        assert capture.capture_id == '3C679366HH908993F'

    @respx.mock
    def test_capture_pending_is_not_completed(self, gateway):
        mock_token()
        respx.post(f"{BASE}/v2/checkout/orders/ORDER2/capture").respond(201, json={
            'id': 'ORDER2', 'status': 'PENDING',
        })

        capture = gateway.capture_order('ORDER2')

        assert not capture.is_completed
        assert capture.capture_id is None

    @respx.mock
    def test_client_error_not_retryable(self, gateway):
        mock_token()
        respx.post(f"{BASE}/v2/checkout/orders/ORDER3/capture").respond(
            422, json={'name': 'UNPROCESSABLE_ENTITY'}
        )

        with pytest.raises(PaymentGatewayError) as exc_info:
            gateway.capture_order('ORDER3')

        assert exc_info.value.retryable is False
        assert exc_info.value.status_code == 422

    @respx.mock
    def test_server_error_retryable(self, gateway):
        mock_token()
        respx.post(f"{BASE}/v2/checkout/orders/ORDER4/capture").respond(503)

        with pytest.raises(PaymentGatewayError) as exc_info:
            gateway.capture_order('ORDER4')

        assert exc_info.value.retryable is True

    @respx.mock
    def test_timeout_retryable(self, gateway):
        mock_token()
        respx.post(f"{BASE}/v2/checkout/orders/ORDER5/capture").mock(
            side_effect=httpx.ReadTimeout('timed out')
        )

        with pytest.raises(PaymentGatewayError) as exc_info:
            gateway.capture_order('ORDER5')

        assert exc_info.value.retryable is True

    @respx.mock
    def test_circuit_opens_after_repeated_failures(self, gateway):
        token_route = respx.post(f"{BASE}/v1/oauth2/token").respond(500)

        for _ in range(gateway.client.circuit_breaker.failure_threshold):
            with pytest.raises(PaymentGatewayError):
                gateway.get_access_token()

        with pytest.raises(PaymentGatewayError) as exc_info:
            gateway.get_access_token()

        assert 'Circuit breaker open' in exc_info.value.message
        assert token_route.call_count == gateway.client.circuit_breaker.failure_threshold

    def test_live_environment_base_url(self):
        assert PayPalGateway(client_id='c', client_secret='s', environment='live').base_url == 'https://api-m.paypal.com'


class TestCircuitBreaker:

    def test_opens_at_threshold(self):
        breaker = CircuitBreaker(failure_threshold=2, reset_timeout=30)

        breaker.record_failure()
        assert breaker.allow_request() is True

        breaker.record_failure()
        assert breaker.state == CircuitBreaker.OPEN
        assert breaker.allow_request() is False

    def test_success_resets_failure_count(self):
        breaker = CircuitBreaker(failure_threshold=2)

        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()

        assert breaker.state == CircuitBreaker.CLOSED

    @patch('shared.common.clients.time.monotonic')
    def test_half_open_trial(self, monotonic):
        monotonic.return_value = 100.0
        breaker = CircuitBreaker(failure_threshold=1, reset_timeout=30)
        breaker.record_failure()

        monotonic.return_value = 131.0
        assert breaker.allow_request() is True
        assert breaker.state == CircuitBreaker.HALF_OPEN

        breaker.record_failure()
        assert breaker.state == CircuitBreaker.OPEN
        assert breaker.allow_request() is False

        monotonic.return_value = 162.0
        assert breaker.allow_request() is True
        breaker.record_success()
        assert breaker.state == CircuitBreaker.CLOSED
