# services/session-service/src/apps/core/services/exceptions.py
"""
Session Service Exceptions

Custom exceptions for booking, payment and calendar operations.
"""

from typing import Optional, Dict, Any


class SessionServiceError(Exception):
    """Base exception for session service errors."""

    def __init__(
        self,
        message: str,
        code: str = "SESSION_SERVICE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class BadRequestError(SessionServiceError):
    """Raised when a request cannot be fulfilled in the current state."""

    def __init__(
        self,
        message: str,
        field: str = None,
        details: Optional[Dict[str, Any]] = None,
        code: str = "BAD_REQUEST"
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, code=code, details=error_details)


class InvalidOrExpiredCodeError(BadRequestError):
    """Raised when a discount code is unknown, inactive or expired."""

    def __init__(self, code_value: str = None, message: str = None):
        super().__init__(
            message=message or "Invalid or expired discount code",
            details={"discount_code": code_value} if code_value else None,
            code="INVALID_DISCOUNT_CODE"
        )


class UsageLimitReachedError(BadRequestError):
    """Raised when a discount code has no uses left."""

    def __init__(self, code_value: str = None, message: str = None):
        super().__init__(
            message=message or "Discount code usage limit reached",
            details={"discount_code": code_value} if code_value else None,
            code="DISCOUNT_USAGE_LIMIT"
        )


class ForbiddenError(SessionServiceError):
    """Raised when the caller is not allowed to act on a resource."""

    def __init__(
        self,
        message: str = "Not authorized to access this resource",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code="FORBIDDEN", details=details)


class NotFoundError(SessionServiceError):
    """Raised when a resource does not exist."""

    def __init__(
        self,
        message: str,
        resource_id: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if resource_id:
            error_details["id"] = str(resource_id)
        super().__init__(message=message, code="NOT_FOUND", details=error_details)


class ConflictError(SessionServiceError):
    """Raised when a request conflicts with concurrent or existing state."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="CONFLICT", details=details)


class PaymentGatewayError(SessionServiceError):
    """
    Raised by payment gateway adapters.

    ``retryable`` is set for timeouts and upstream 5xx responses, where the
    caller may safely try again later.
    """

    def __init__(
        self,
        message: str,
        retryable: bool = False,
        status_code: int = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.retryable = retryable
        self.status_code = status_code
        error_details = details or {}
        error_details["retryable"] = retryable
        if status_code:
            error_details["status_code"] = status_code
        super().__init__(message=message, code="PAYMENT_GATEWAY_ERROR", details=error_details)
