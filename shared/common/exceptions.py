# shared/common/exceptions.py
"""
API Error Envelope

Every error leaving a service has the shape::

    {"success": false, "error": {"code": ..., "message": ..., "request_id": ...}}

Service-layer errors are converted by each service's views; this handler
covers whatever DRF and Django raise on their own.
"""

import logging
import traceback
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .constants import ERROR_CODES, STATUS_ERROR_CODES
from .middleware import get_request_id

logger = logging.getLogger(__name__)


def error_envelope(
    code: str,
    message: Optional[str] = None,
    request_id: Optional[str] = None,
    **extra: Any
) -> Dict[str, Any]:
    error = {
        'code': code,
        'message': message or ERROR_CODES.get(code, code),
        'request_id': request_id,
    }
    error.update(extra)
    return {'success': False, 'error': error}


def custom_exception_handler(exc, context) -> Optional[Response]:
    """DRF exception handler producing the shared error envelope."""
    request = context.get('request')
    request_id = getattr(request, 'request_id', None) or get_request_id()

    response = exception_handler(exc, context)
    if response is not None:
        code = STATUS_ERROR_CODES.get(response.status_code, 'ERROR')
        extra = {}
        if isinstance(response.data, dict) and 'detail' not in response.data:
            # Serializer field errors
            extra['details'] = response.data
        response.data = error_envelope(code, _message_for(exc, response), request_id, **extra)
        return response

    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages}
        return Response(
            error_envelope('VALIDATION_ERROR', request_id=request_id, details=details),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, Http404):
        return Response(
            error_envelope('NOT_FOUND', str(exc) or None, request_id),
            status=status.HTTP_404_NOT_FOUND
        )

    logger.exception(
        f"Unhandled exception: {exc}",
        extra={'request_id': request_id, 'exception_type': type(exc).__name__}
    )

    if settings.DEBUG:
        body = error_envelope(
            'INTERNAL_ERROR',
            str(exc),
            request_id,
            type=type(exc).__name__,
            traceback=traceback.format_exc().split('\n'),
        )
    else:
        body = error_envelope('INTERNAL_ERROR', request_id=request_id)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _message_for(exc, response: Response) -> str:
    detail = getattr(exc, 'detail', None)
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return str(detail[0])
    if isinstance(detail, dict):
        return str(detail.get('detail', ERROR_CODES['VALIDATION_ERROR']))
    if isinstance(response.data, dict):
        return str(response.data.get('detail', response.data))
    return str(response.data)
