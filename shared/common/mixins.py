"""
Reusable Model Mixins
"""

import uuid
from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Mixin that provides UUID as primary key instead of auto-increment integer.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record"
    )

    class Meta:
        abstract = True


class TimestampMixin(models.Model):
    """
    Mixin that provides created_at and updated_at timestamp fields.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When this record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When this record was last updated"
    )

    class Meta:
        abstract = True


class ActiveMixin(models.Model):
    """
    Mixin for records that are soft-deleted by deactivation.
    """

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether this record is active"
    )

    class Meta:
        abstract = True

    def deactivate(self):
        """Soft delete the record, keeping the row for audit"""
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])
