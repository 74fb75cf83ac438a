"""
Base Views and Mixins

Common functionality for Session Service API views.
"""

import logging
from typing import Optional
from uuid import UUID

from rest_framework import status
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from shared.common.exceptions import error_envelope

from apps.core.services.exceptions import (
    SessionServiceError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
)

logger = logging.getLogger(__name__)


class UserContextMixin:
    """
    Mixin for extracting the caller from the authenticated JWT user.
    """

    def get_user_id(self) -> UUID:
        """
        Returns:
            User UUID from the token ``sub`` claim

        Raises:
            BadRequestError: If the claim is missing or malformed
        """
        user_id = getattr(self.request.user, 'id', None)

        if not user_id:
            raise BadRequestError(message="User ID is required", field="user_id")

        try:
            return UUID(str(user_id))
        except ValueError:
            raise BadRequestError(message="Invalid user ID format", field="user_id")

    def get_role(self) -> Optional[str]:
        return getattr(self.request.user, 'role', None)


class ExceptionHandlerMixin:
    """Mixin for handling service layer exceptions."""

    status_map = (
        (NotFoundError, status.HTTP_404_NOT_FOUND),
        (ForbiddenError, status.HTTP_403_FORBIDDEN),
        (ConflictError, status.HTTP_409_CONFLICT),
        (BadRequestError, status.HTTP_400_BAD_REQUEST),
        (SessionServiceError, status.HTTP_400_BAD_REQUEST),
    )

    def handle_exception(self, exc):
        """Convert service exceptions to appropriate HTTP responses."""
        for exc_class, http_status in self.status_map:
            if isinstance(exc, exc_class):
                if http_status >= status.HTTP_409_CONFLICT:
                    logger.warning(f"{exc.code}: {exc.message}")
                body = error_envelope(
                    exc.code,
                    exc.message,
                    getattr(self.request, 'request_id', None),
                    details=exc.details,
                )
                return Response(body, status=http_status)

        # Default DRF handling (authentication, validation, ...)
        return super().handle_exception(exc)


class BaseSessionViewSet(
    UserContextMixin,
    ExceptionHandlerMixin,
    ViewSet
):
    """
    Base ViewSet for Session Service.

    Provides user context extraction plus exception handling.
    """

    def get_validated_data(self, serializer_class, data=None, partial=False):
        serializer = serializer_class(
            data=self.request.data if data is None else data,
            partial=partial
        )
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def get_filters(self, filter_serializer_class):
        """Extract and validate filters from the query string."""
        serializer = filter_serializer_class(data=self.request.query_params)
        serializer.is_valid(raise_exception=True)
        return {k: v for k, v in serializer.validated_data.items() if v is not None}
