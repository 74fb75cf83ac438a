# services/session-service/src/apps/core/models/discount.py
"""
Discount Model

Coach-issued discount codes with an expiry and a usage cap.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin


class DiscountQuerySet(models.QuerySet):

    def usable(self, now=None):
        """Discounts that are active, unexpired and under their usage cap."""
        now = now or timezone.now()
        return self.filter(
            is_active=True,
            expiry__gte=now,
            use_count__lt=models.F('max_usage'),
        )


class Discount(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin):
    """
    Discount code. ``code`` is the natural key.

    ``use_count`` is only ever changed by a relative conditional update,
    and the database enforces ``use_count <= max_usage``.
    """

    coach_id = models.UUIDField(db_index=True)
    code = models.CharField(max_length=50, unique=True)
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    expiry = models.DateTimeField()
    use_count = models.PositiveIntegerField(default=0)
    max_usage = models.PositiveIntegerField(default=1)

    objects = DiscountQuerySet.as_manager()

    class Meta:
        db_table = 'discounts'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(use_count__lte=models.F('max_usage')),
                name='discount_use_count_within_max_usage'
            ),
        ]

    def __str__(self):
        return f"{self.code} (-{self.amount}, {self.use_count}/{self.max_usage})"

    @property
    def is_expired(self) -> bool:
        return self.expiry < timezone.now()

    @property
    def is_exhausted(self) -> bool:
        return self.use_count >= self.max_usage

    @property
    def is_usable(self) -> bool:
        return self.is_active and not self.is_expired and not self.is_exhausted
