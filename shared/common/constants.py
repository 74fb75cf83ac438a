"""
Shared Constants Module.

Common constants used by the coach session booking platform services.
"""
from enum import Enum
from typing import Dict, FrozenSet


# =============================================================================
# USER & AUTHENTICATION
# =============================================================================

class UserRole(str, Enum):
    """User roles carried in the JWT ``role`` claim."""
    USER = "user"
    PREMIUM_USER = "premium_user"
    COACH = "coach"
    ADMIN = "admin"


# Roles that book sessions (the requesting side of a session)
REQUESTER_ROLES: FrozenSet[str] = frozenset({
    UserRole.USER.value,
    UserRole.PREMIUM_USER.value,
})

# Roles that deliver sessions (the providing side of a session)
PROVIDER_ROLES: FrozenSet[str] = frozenset({
    UserRole.COACH.value,
})


# =============================================================================
# PAYMENTS
# =============================================================================

class Currency(str, Enum):
    """Supported currencies."""
    USD = "USD"


DEFAULT_CURRENCY = Currency.USD.value

# Remote status that marks a captured order as settled
GATEWAY_CAPTURE_COMPLETED = "COMPLETED"


# =============================================================================
# ERROR CODES
# =============================================================================

ERROR_CODES: Dict[str, str] = {
    'VALIDATION_ERROR': 'Validation error.',
    'UNAUTHORIZED': 'Authentication credentials were not provided or are invalid.',
    'FORBIDDEN': 'You do not have permission to perform this action.',
    'NOT_FOUND': 'The requested resource was not found.',
    'METHOD_NOT_ALLOWED': 'Method not allowed.',
    'CONFLICT': 'The request conflicts with the current state of the resource.',
    'INTERNAL_ERROR': 'An unexpected error occurred. Please try again later.',
}

# HTTP status -> envelope code for framework-raised errors
STATUS_ERROR_CODES: Dict[int, str] = {
    400: 'VALIDATION_ERROR',
    401: 'UNAUTHORIZED',
    403: 'FORBIDDEN',
    404: 'NOT_FOUND',
    405: 'METHOD_NOT_ALLOWED',
    409: 'CONFLICT',
}
