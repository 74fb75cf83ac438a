# shared/common/middleware.py
"""
Request Tracing Middleware

``RequestIDMiddleware`` binds a request ID for the duration of the request;
``RequestIDLogFilter`` stamps it on every log record emitted meanwhile, so
service and gateway logs can be joined to the access log line.
"""

import uuid
import time
import logging
from contextvars import ContextVar
from typing import Callable, Optional
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

HEALTH_PATHS = ('/health/', '/ready/')

_request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)


def get_request_id() -> Optional[str]:
    return _request_id.get()


class RequestIDLogFilter(logging.Filter):
    """Adds ``request_id`` to log records (None outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, 'request_id'):
            record.request_id = _request_id.get()
        return True


class RequestIDMiddleware:
    """
    Attach a request ID to every request and echo it in the response.
    An incoming ``X-Request-ID`` header is reused for cross-service tracing.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request.request_id = request_id
        token = _request_id.set(request_id)

        try:
            response = self.get_response(request)
        finally:
            _request_id.reset(token)

        response['X-Request-ID'] = request_id
        return response


class LoggingMiddleware:
    """
    Access log: one line per request with status, duration and caller.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path in HEALTH_PATHS:
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - started) * 1000, 2)

        # DRF authenticates inside the view, so the user is read after the call
        user = getattr(request, 'user', None)

        log_method = logger.warning if response.status_code >= 400 else logger.info
        log_method(
            f"{request.method} {request.path} - {response.status_code}",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'method': request.method,
                'path': request.path,
                'status_code': response.status_code,
                'duration_ms': duration_ms,
                'user_id': str(getattr(user, 'id', None)),
                'role': getattr(user, 'role', None),
                'ip_address': _client_ip(request),
            }
        )

        response['X-Response-Time'] = f"{duration_ms:.2f}ms"
        return response


def _client_ip(request: HttpRequest) -> str:
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '')
