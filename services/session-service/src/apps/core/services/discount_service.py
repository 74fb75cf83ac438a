# services/session-service/src/apps/core/services/discount_service.py
"""
Discount Service

Validation and atomic usage accounting for discount codes.
"""

import uuid
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from django.db import transaction, IntegrityError
from django.db.models import F
from django.utils import timezone

from apps.core.models import Discount
from .exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    InvalidOrExpiredCodeError,
    UsageLimitReachedError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    code: str
    amount: Decimal
    is_valid: bool = True


class DiscountService:
    """
    Service for managing discount codes.

    Handles:
    - Eligibility checks
    - Claiming a use with a single conditional update
    - Coach-owned CRUD (soft delete)
    """

    UPDATABLE_FIELDS = ('amount', 'expiry', 'max_usage', 'is_active')

    # ==========================================================================
    # Eligibility
    # ==========================================================================

    def find_usable(self, code: str) -> Optional[Discount]:
        """Return the discount if it can be used right now, else None."""
        if not code:
            return None
        return Discount.objects.usable().filter(code=code).first()

    def validate(self, code: str) -> ValidationResult:
        """
        Check a code before checkout.

        Raises:
            InvalidOrExpiredCodeError: unknown, inactive or expired code
            UsageLimitReachedError: no uses left
        """
        discount = Discount.objects.filter(code=code).first() if code else None

        if discount is None or not discount.is_active or discount.is_expired:
            raise InvalidOrExpiredCodeError(code)

        if discount.is_exhausted:
            raise UsageLimitReachedError(code)

        return ValidationResult(code=discount.code, amount=discount.amount)

    def consume(self, code: str) -> bool:
        """
        Claim one use of a code.

        Eligibility check and increment are one UPDATE, so concurrent
        callers can never push ``use_count`` past ``max_usage``.

        Returns:
            True if a use was claimed, False if the code is not usable
        """
        if not code:
            return False

        updated = Discount.objects.usable().filter(code=code).update(
            use_count=F('use_count') + 1,
            updated_at=timezone.now(),
        )

        if updated:
            logger.info(f"Consumed discount code {code}")
        else:
            logger.info(f"Discount code {code} could not be consumed")

        return bool(updated)

    # ==========================================================================
    # Coach CRUD
    # ==========================================================================

    def create(
        self,
        coach_id: uuid.UUID,
        code: str,
        amount: Decimal,
        expiry: datetime,
        max_usage: int = 1
    ) -> Discount:
        """Create a discount code owned by a coach."""
        if Discount.objects.filter(code=code).exists():
            raise BadRequestError("Discount code already exists", field="code")

        try:
            with transaction.atomic():
                discount = Discount.objects.create(
                    coach_id=coach_id,
                    code=code,
                    amount=amount,
                    expiry=expiry,
                    max_usage=max_usage,
                )
        except IntegrityError:
            raise BadRequestError("Discount code already exists", field="code")

        logger.info(f"Created discount {code} for coach {coach_id}")
        return discount

    def find_by_coach(self, coach_id: uuid.UUID) -> List[Discount]:
        return list(Discount.objects.filter(coach_id=coach_id).order_by('-created_at'))

    def get_owned(self, code: str, coach_id: uuid.UUID) -> Discount:
        """Load an active discount and check the coach owns it."""
        discount = Discount.objects.filter(code=code, is_active=True).first()
        if discount is None:
            raise NotFoundError("Discount not found", details={'code': code})

        if str(discount.coach_id) != str(coach_id):
            raise ForbiddenError("Not authorized to modify this discount")

        return discount

    @transaction.atomic
    def update(self, code: str, coach_id: uuid.UUID, **fields) -> Discount:
        discount = self.get_owned(code, coach_id)

        changed = []
        for name in self.UPDATABLE_FIELDS:
            if name in fields and fields[name] is not None:
                setattr(discount, name, fields[name])
                changed.append(name)

        if 'max_usage' in changed and discount.max_usage < discount.use_count:
            raise BadRequestError(
                "max_usage cannot be lower than the current use count",
                field="max_usage"
            )

        if changed:
            discount.save(update_fields=changed + ['updated_at'])
            logger.info(f"Updated discount {code}: {', '.join(changed)}")

        return discount

    @transaction.atomic
    def remove(self, code: str, coach_id: uuid.UUID) -> Discount:
        """Soft delete; the row is retained for audit."""
        discount = self.get_owned(code, coach_id)
        discount.deactivate()
        logger.info(f"Deactivated discount {code}")
        return discount
