# services/session-service/src/apps/core/gateways/payment.py
"""
Payment Gateway Adapters

The payment service depends only on ``PaymentGateway``; ``PayPalGateway``
talks to the PayPal Orders v2 REST API and ``FakePaymentGateway`` is a
deterministic in-memory stand-in for tests and local development.
"""

import uuid
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

import httpx
from django.conf import settings
from django.utils.module_loading import import_string

from shared.common.clients import BaseHTTPClient, CircuitBreakerError
from shared.common.constants import GATEWAY_CAPTURE_COMPLETED
from shared.common.utils import format_amount

from ..services.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

PAYPAL_BASE_URLS = {
    'sandbox': 'https://api-m.sandbox.paypal.com',
    'live': 'https://api-m.paypal.com',
}


@dataclass(frozen=True)
class GatewayOrder:
    """A remote order awaiting buyer approval."""
    id: str
    approval_url: str
    status: str = 'CREATED'


@dataclass(frozen=True)
class GatewayCapture:
    """Result of capturing a remote order."""
    order_id: str
    status: str
    capture_id: Optional[str] = None
    raw: Dict = field(default_factory=dict)

    @property
    def is_completed(self) -> bool:
        return self.status == GATEWAY_CAPTURE_COMPLETED


class PaymentGateway(ABC):
    """Two-phase (create, then capture) payment gateway."""

    @abstractmethod
    def get_access_token(self) -> str:
        ...

    @abstractmethod
    def create_order(
        self,
        amount: Decimal,
        currency: str,
        description: str,
        return_url: str,
        cancel_url: str
    ) -> GatewayOrder:
        ...

    @abstractmethod
    def capture_order(self, order_id: str) -> GatewayCapture:
        ...


# =============================================================================
# PAYPAL
# =============================================================================

class PayPalGateway(PaymentGateway):
    """
    PayPal Orders v2 client.

    Every call fetches a client-credentials token first. Transport errors
    and 5xx responses raise a retryable ``PaymentGatewayError``.
    """

    def __init__(
        self,
        client_id: str = None,
        client_secret: str = None,
        environment: str = None,
        timeout: float = None,
        transport: httpx.BaseTransport = None
    ):
        self.client_id = client_id or settings.PAYPAL_CLIENT_ID
        self.client_secret = client_secret or settings.PAYPAL_CLIENT_SECRET
        environment = environment or getattr(settings, 'PAYPAL_ENVIRONMENT', 'sandbox')
        self.base_url = PAYPAL_BASE_URLS.get(environment, PAYPAL_BASE_URLS['sandbox'])
        self.client = BaseHTTPClient(
            service_name='paypal',
            base_url=self.base_url,
            timeout=timeout or getattr(settings, 'PAYPAL_TIMEOUT_SECONDS', 10.0),
            transport=transport,
        )

    def _send(self, method: str, path: str, operation: str, **kwargs) -> Dict:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise PaymentGatewayError(f"PayPal {operation} timed out", retryable=True) from e
        except httpx.RequestError as e:
            raise PaymentGatewayError(f"PayPal {operation} request failed: {e}", retryable=True) from e
        except CircuitBreakerError as e:
            raise PaymentGatewayError(str(e), retryable=True) from e

        if response.is_error:
            raise PaymentGatewayError(
                f"PayPal {operation} failed",
                retryable=response.status_code >= 500,
                status_code=response.status_code,
                details={'response': response.text[:500]},
            )

        try:
            return response.json()
        except ValueError as e:
            raise PaymentGatewayError(f"PayPal {operation} returned invalid JSON") from e

    def get_access_token(self) -> str:
        data = self._send(
            'POST',
            '/v1/oauth2/token',
            'token request',
            data={'grant_type': 'client_credentials'},
            auth=(self.client_id, self.client_secret),
        )
        token = data.get('access_token')
        if not token:
            raise PaymentGatewayError("PayPal token response missing access_token")
        return token

    def _auth_headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {self.get_access_token()}",
            'Content-Type': 'application/json',
        }

    def create_order(
        self,
        amount: Decimal,
        currency: str,
        description: str,
        return_url: str,
        cancel_url: str
    ) -> GatewayOrder:
        body = {
            'intent': 'CAPTURE',
            'purchase_units': [{
                'amount': {
                    'currency_code': currency,
                    'value': format_amount(amount),
                },
                'description': description,
            }],
            'application_context': {
                'return_url': return_url,
                'cancel_url': cancel_url,
            },
        }
        data = self._send(
            'POST', '/v2/checkout/orders', 'order creation',
            json=body, headers=self._auth_headers(),
        )

        approval_url = self._find_link(data.get('links', []), 'approve')
        if not data.get('id') or not approval_url:
            raise PaymentGatewayError(
                "PayPal order response missing id or approve link",
                details={'order_id': data.get('id')},
            )

        logger.info(f"Created PayPal order {data['id']}", extra={'amount': format_amount(amount)})
        return GatewayOrder(id=data['id'], approval_url=approval_url, status=data.get('status', 'CREATED'))

    def capture_order(self, order_id: str) -> GatewayCapture:
        data = self._send(
            'POST', f'/v2/checkout/orders/{order_id}/capture', 'capture',
            headers=self._auth_headers(),
        )
        capture_id = self._find_capture_id(data)
        logger.info(
            f"Captured PayPal order {order_id}",
            extra={'status': data.get('status'), 'capture_id': capture_id}
        )
        return GatewayCapture(
            order_id=data.get('id', order_id),
            status=data.get('status', ''),
            capture_id=capture_id,
            raw=data,
        )

    @staticmethod
    def _find_link(links: List[Dict], rel: str) -> Optional[str]:
        for link in links:
            if link.get('rel') == rel:
                return link.get('href')
        return None

    @staticmethod
    def _find_capture_id(data: Dict) -> Optional[str]:
        for unit in data.get('purchase_units', []):
            captures = unit.get('payments', {}).get('captures', [])
            if captures:
                return captures[0].get('id')
        return None


# =============================================================================
# FAKE
# =============================================================================

class FakePaymentGateway(PaymentGateway):
    """
    Deterministic in-memory gateway.

    ``capture_status`` controls the remote status reported on capture and
    ``fail_on`` names operations ('create', 'capture') that should raise.
    Calls are recorded in ``calls`` for assertions.
    """

    def __init__(self, capture_status: str = GATEWAY_CAPTURE_COMPLETED, fail_on=()):
        self.capture_status = capture_status
        self.fail_on = set(fail_on)
        self.calls: List[tuple] = []
        self.orders: Dict[str, Dict] = {}

    def get_access_token(self) -> str:
        self.calls.append(('token',))
        return 'fake-access-token'

    def create_order(self, amount, currency, description, return_url, cancel_url) -> GatewayOrder:
        self.calls.append(('create', format_amount(amount), currency))
        if 'create' in self.fail_on:
            raise PaymentGatewayError("Fake gateway create failure")

        order_id = f"FAKE-{uuid.uuid4().hex[:12].upper()}"
        self.orders[order_id] = {'amount': format_amount(amount), 'currency': currency}
        return GatewayOrder(
            id=order_id,
            approval_url=f"https://fake-gateway.local/checkoutnow?token={order_id}",
        )

    def capture_order(self, order_id: str) -> GatewayCapture:
        self.calls.append(('capture', order_id))
        if 'capture' in self.fail_on:
            raise PaymentGatewayError("Fake gateway capture timed out", retryable=True)

        capture_id = f"CAP-{order_id}" if self.capture_status == GATEWAY_CAPTURE_COMPLETED else None
        return GatewayCapture(order_id=order_id, status=self.capture_status, capture_id=capture_id)

    def call_count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)


def get_payment_gateway() -> PaymentGateway:
    """Instantiate the gateway configured in ``PAYMENT_GATEWAY_CLASS``."""
    gateway_class = import_string(settings.PAYMENT_GATEWAY_CLASS)
    return gateway_class()
