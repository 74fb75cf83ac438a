# services/session-service/src/apps/core/models/payment.py
"""
Payment Model

One row per gateway order attempt.
"""

from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from shared.common.constants import DEFAULT_CURRENCY
from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


def default_currency():
    return getattr(settings, 'DEFAULT_CURRENCY', DEFAULT_CURRENCY)


class PaymentQuerySet(models.QuerySet):

    def in_progress(self, session, now=None):
        """
        PENDING payments for ``session`` young enough that the payer may
        still be approving them.
        """
        window = getattr(settings, 'PAYMENT_PENDING_WINDOW_MINUTES', 30)
        now = now or timezone.now()
        return self.filter(
            session=session,
            status=Payment.Status.PENDING,
            created_at__gte=now - timedelta(minutes=window),
        )


class Payment(UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Payment attempt for a session.

    Status only moves forward (pending -> completed | failed) except
    through the admin override in ``PaymentService.update_status``.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        COMPLETED = 'completed', 'Completed'
        FAILED = 'failed', 'Failed'
        REFUNDED = 'refunded', 'Refunded'

    user_id = models.UUIDField(db_index=True)
    session = models.ForeignKey(
        'core.Session',
        on_delete=models.PROTECT,
        related_name='payments',
        blank=True,
        null=True
    )

    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, default=default_currency)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    # Gateway references
    paypal_order_id = models.CharField(max_length=100, unique=True, blank=True, null=True)
    paypal_capture_id = models.CharField(max_length=100, blank=True, null=True)

    failure_reason = models.TextField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    objects = PaymentQuerySet.as_manager()

    class Meta:
        db_table = 'payments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_id', 'status']),
            models.Index(fields=['session', 'status']),
        ]

    def __str__(self):
        return f"Payment {self.id} [{self.status}] {self.amount} {self.currency}"

    def mark_failed(self, reason: str) -> bool:
        """
        PENDING -> FAILED as one conditional UPDATE.

        Returns False, leaving the row alone, when the payment is no longer
        PENDING (e.g. a concurrent capture completed it).
        """
        updated = Payment.objects.filter(id=self.id, status=self.Status.PENDING).update(
            status=self.Status.FAILED,
            failure_reason=reason,
            updated_at=timezone.now(),
        )
        self.refresh_from_db(fields=['status', 'failure_reason', 'updated_at'])
        return bool(updated)

    def mark_completed(self, capture_id: str):
        self.status = self.Status.COMPLETED
        self.paypal_capture_id = capture_id
        self.completed_at = timezone.now()
        self.save(update_fields=['status', 'paypal_capture_id', 'completed_at', 'updated_at'])
