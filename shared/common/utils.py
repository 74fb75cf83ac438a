# shared/common/utils.py
"""
Common Utility Functions
"""

import random
import time
import logging
from decimal import Decimal
from typing import Callable, TypeVar, Union

from django.db import OperationalError

logger = logging.getLogger(__name__)

T = TypeVar('T')


# =============================================================================
# NUMBER UTILITIES
# =============================================================================

def round_decimal(value: Union[Decimal, float, int, str], places: int = 2) -> Decimal:
    """Round to specified decimal places"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal(10) ** -places)


def format_amount(amount: Union[Decimal, float]) -> str:
    """Format an amount the way payment gateways expect it ("80.00")"""
    return f"{round_decimal(amount):.2f}"


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

# Lock and serialization failures that are safe to replay from the start
_RETRYABLE_ERROR_SNIPPETS = (
    'could not serialize access',
    'deadlock detected',
    'database is locked',
    'server closed the connection',
)


def _is_retryable_db_error(exc: OperationalError) -> bool:
    message = str(exc).lower()
    return any(snippet in message for snippet in _RETRYABLE_ERROR_SNIPPETS)


def _retry_delay(attempt: int) -> float:
    base = 0.05 * (2 ** (attempt - 1))
    return base + random.uniform(0, 0.05 * attempt)


def with_db_retry(op_name: str, func: Callable[[], T], *, max_attempts: int = 3) -> T:
    """
    Run a transactional operation, replaying it on transient conflicts.

    ``func`` must open its own transaction so each attempt starts clean.
    """
    attempt = 1
    while True:
        try:
            return func()
        except OperationalError as exc:
            if attempt >= max_attempts or not _is_retryable_db_error(exc):
                raise

            delay = _retry_delay(attempt)
            logger.warning(
                "Transient DB conflict, retrying",
                extra={
                    'op': op_name,
                    'attempt': attempt,
                    'delay': delay,
                    'error': str(exc),
                },
            )
            time.sleep(delay)
            attempt += 1
