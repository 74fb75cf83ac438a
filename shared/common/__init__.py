# Shared library for the coach session booking platform: authentication,
# permissions, the API error envelope, middleware, model mixins, an HTTP
# client with a circuit breaker, and small utilities.

__version__ = "1.0.0"

from .exceptions import custom_exception_handler, error_envelope

from .constants import (
    UserRole,
    REQUESTER_ROLES,
    PROVIDER_ROLES,
    DEFAULT_CURRENCY,
    ERROR_CODES,
)

__all__ = [
    '__version__',
    'custom_exception_handler',
    'error_envelope',
    'UserRole',
    'REQUESTER_ROLES',
    'PROVIDER_ROLES',
    'DEFAULT_CURRENCY',
    'ERROR_CODES',
]
