# shared/common/clients.py
"""
HTTP Client for Third-Party APIs

A synchronous ``httpx`` client with a bounded timeout and a circuit breaker,
used by gateway adapters. Non-2xx responses are returned to the caller, which
owns the mapping to its own error types.
"""

import time
import httpx
import logging
from typing import Dict, Any, Optional
from django.conf import settings

logger = logging.getLogger(__name__)


# =============================================================================
# CIRCUIT BREAKER
# =============================================================================

class CircuitBreakerError(Exception):
    """Raised instead of calling an upstream whose circuit is open"""
    pass


class CircuitBreaker:
    """
    Consecutive-failure circuit breaker.

    closed: every call goes through; ``failure_threshold`` failures in a row
    open the circuit. open: calls are refused until ``reset_timeout`` seconds
    have passed. half_open: one trial call decides between closed and open.
    """

    CLOSED = 'closed'
    OPEN = 'open'
    HALF_OPEN = 'half_open'

    def __init__(self, failure_threshold: int = 5, reset_timeout: float = 30.0):
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.state = self.CLOSED
        self.failures = 0
        self.opened_at: Optional[float] = None

    def allow_request(self) -> bool:
        if self.state == self.OPEN:
            if time.monotonic() - self.opened_at < self.reset_timeout:
                return False
            self.state = self.HALF_OPEN
        return True

    def record_success(self) -> None:
        if self.state != self.CLOSED:
            logger.info("Circuit breaker closed")
        self.state = self.CLOSED
        self.failures = 0
        self.opened_at = None

    def record_failure(self) -> None:
        self.failures += 1
        if self.state == self.HALF_OPEN or self.failures >= self.failure_threshold:
            if self.state != self.OPEN:
                logger.warning(f"Circuit breaker opened after {self.failures} failures")
            self.state = self.OPEN
            self.opened_at = time.monotonic()


# =============================================================================
# HTTP CLIENT
# =============================================================================

class BaseHTTPClient:
    """
    Client for one upstream API.

    ``transport`` lets tests route requests without a network.
    """

    def __init__(
        self,
        service_name: str,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
        circuit_breaker: Optional[CircuitBreaker] = None
    ):
        self.service_name = service_name
        self.base_url = base_url.rstrip('/')
        self.timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self.transport = transport
        self.circuit_breaker = circuit_breaker or CircuitBreaker()

    def _headers(self, extra: Optional[Dict] = None) -> Dict:
        headers = {
            'Accept': 'application/json',
            'X-Source-Service': getattr(settings, 'SERVICE_NAME', 'unknown'),
        }
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict] = None,
        data: Any = None,
        headers: Optional[Dict] = None,
        auth: Any = None
    ) -> httpx.Response:
        """
        Send one request.

        Raises:
            CircuitBreakerError: the circuit is open
            httpx.RequestError: transport failure, including timeouts
        """
        if not self.circuit_breaker.allow_request():
            raise CircuitBreakerError(f"Circuit breaker open for {self.service_name}")

        url = f"{self.base_url}{path}"
        started = time.monotonic()

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    method,
                    url,
                    json=json,
                    data=data,
                    headers=self._headers(headers),
                    auth=auth,
                )
        except httpx.RequestError as e:
            self.circuit_breaker.record_failure()
            logger.error(
                f"{self.service_name} {method} {path} failed: {e}",
                extra={'upstream': self.service_name, 'url': url}
            )
            raise

        # 4xx is the caller's problem, not the upstream's health
        if response.status_code >= 500:
            self.circuit_breaker.record_failure()
        else:
            self.circuit_breaker.record_success()

        log_method = logger.error if response.is_error else logger.debug
        log_method(
            f"{self.service_name} {method} {path} - {response.status_code}",
            extra={
                'upstream': self.service_name,
                'status_code': response.status_code,
                'duration_ms': round((time.monotonic() - started) * 1000, 2),
            }
        )
        return response
