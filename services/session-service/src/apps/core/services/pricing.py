# services/session-service/src/apps/core/services/pricing.py
"""
Session price calculation.
"""

from decimal import Decimal
from typing import Optional, Union

from shared.common.utils import round_decimal

ZERO = Decimal('0.00')


def calculate_price(
    base_price: Union[Decimal, int, str],
    discount: Optional[object] = None
) -> Decimal:
    """
    Final price of a session: base price minus the discount amount,
    clamped at zero. ``discount`` is anything with an ``amount`` or None.
    """
    price = round_decimal(base_price)
    if discount is None:
        return price

    return max(ZERO, round_decimal(price - round_decimal(discount.amount)))
