# services/session-service/src/apps/core/services/payment_service.py
"""
Payment Service

Order creation and idempotent capture against the payment gateway.
"""

import uuid
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from shared.common.constants import UserRole
from shared.common.utils import round_decimal, with_db_retry

from apps.core.events import EventType, publish_payment_event
from apps.core.models import Payment, Session
from apps.core.models.payment import default_currency
from .exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PaymentGatewayError,
)
from .ownership import is_requester
from .session_service import SessionService
from .time_slot_service import TimeSlotService

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Service for session payments.

    Handles:
    - Creating a gateway order and its PENDING payment row
    - Capturing an order (payment, session and slot updated in one transaction)
    - Administrative status overrides

    Order creation and settlement lock the session row, the same lock
    ``SessionService.cancel`` takes, so cancel, order and capture on one
    session are serialized.
    """

    def __init__(
        self,
        gateway=None,
        sessions: SessionService = None,
        time_slots: TimeSlotService = None
    ):
        if gateway is None:
            from apps.core.gateways import get_payment_gateway
            gateway = get_payment_gateway()
        self.gateway = gateway
        self.sessions = sessions or SessionService()
        self.time_slots = time_slots or self.sessions.time_slots

    # ==========================================================================
    # Order creation
    # ==========================================================================

    def create_order(
        self,
        session_id: uuid.UUID,
        amount: Decimal,
        user_id: uuid.UUID,
        role: str
    ) -> Dict[str, Any]:
        """
        Create a gateway order for a session.

        Only one order per session may be awaiting approval at a time.

        Returns:
            Dict with order_id, approval_url and payment_id
        """
        session = self.sessions.find_one(session_id, user_id, role)

        if not is_requester(session, user_id, role):
            raise BadRequestError("Invalid session")

        self._check_payable(session)

        amount = self._parse_amount(amount)
        if amount != round_decimal(session.price):
            raise BadRequestError(
                "Amount does not match session price",
                field="amount",
                details={'expected': str(session.price), 'received': str(amount)}
            )

        currency = default_currency()
        with transaction.atomic():
            session = Session.objects.select_for_update().get(id=session.id)
            self._check_payable(session)

            if Payment.objects.in_progress(session).exists():
                raise ConflictError(
                    "Payment in progress",
                    details={'session_id': str(session.id)}
                )

            payment = Payment.objects.create(
                user_id=user_id,
                session=session,
                amount=amount,
                currency=currency,
                status=Payment.Status.PENDING,
            )

        frontend_url = getattr(settings, 'FRONTEND_URL', '').rstrip('/')
        try:
            order = self.gateway.create_order(
                amount=amount,
                currency=currency,
                description=f"{session.booking_type.name} - session {session.id}",
                return_url=f"{frontend_url}/payment/success",
                cancel_url=f"{frontend_url}/payment/cancel",
            )
        except PaymentGatewayError as e:
            self._fail(payment, e.message)
            logger.error(
                f"Payment order creation failed for session {session.id}",
                extra={'payment_id': str(payment.id), 'error': e.message, 'retryable': e.retryable}
            )
            raise BadRequestError(
                "Failed to create payment order",
                details={'retryable': e.retryable},
                code="PAYMENT_ORDER_FAILED"
            ) from e

        payment.paypal_order_id = order.id
        payment.save(update_fields=['paypal_order_id', 'updated_at'])

        logger.info(
            f"Created payment order {order.id} for session {session.id}",
            extra={'payment_id': str(payment.id), 'amount': str(amount)}
        )
        publish_payment_event(EventType.PAYMENT_ORDER_CREATED, payment)

        return {
            'order_id': order.id,
            'approval_url': order.approval_url,
            'payment_id': str(payment.id),
        }

    @staticmethod
    def _check_payable(session: Session) -> None:
        if session.is_cancelled:
            raise BadRequestError("Session cancelled")
        if session.is_paid:
            raise BadRequestError("Session already paid")

    # ==========================================================================
    # Capture
    # ==========================================================================

    def capture_order(
        self,
        order_id: str,
        session_id: uuid.UUID,
        user_id: uuid.UUID,
        role: str
    ) -> Dict[str, Any]:
        """
        Capture an approved order.

        Re-capturing an order that already settled returns the earlier
        result without calling the gateway again.

        Returns:
            Dict with success, payment_id (the order id) and capture_id

        Raises:
            BadRequestError: session cancelled or paid by another order,
                or the gateway did not complete the capture
            ConflictError: the gateway captured the money but the session
                was cancelled or paid meanwhile; the payment is flagged
                for refund
        """
        session = self.sessions.find_one(session_id, user_id, role)

        if not is_requester(session, user_id, role):
            raise BadRequestError("Invalid session")

        payment = Payment.objects.filter(paypal_order_id=order_id).first()

        if payment is not None and payment.session_id not in (None, session.id):
            raise BadRequestError("Order does not belong to this session")

        prior = self._prior_capture(order_id, session, payment)
        if prior is not None:
            logger.info(f"Order {order_id} already captured, returning prior result")
            return prior

        if session.is_cancelled:
            raise BadRequestError("Session cancelled")

        if session.is_paid:
            self._fail(payment, f"Session already paid by order {session.payment_id}")
            raise BadRequestError("Session already paid")

        try:
            capture = self.gateway.capture_order(order_id)
        except PaymentGatewayError as e:
            # A concurrent capture of the same order may have won the race
            prior = self._fresh_prior_capture(order_id, session.id, payment)
            if prior is not None:
                logger.info(f"Order {order_id} captured concurrently, returning that result")
                return prior

            self._fail(payment, e.message)
            logger.error(
                f"Capture of order {order_id} failed",
                extra={'error': e.message, 'retryable': e.retryable}
            )
            raise BadRequestError(
                "Payment capture failed",
                details={'retryable': e.retryable},
                code="PAYMENT_CAPTURE_FAILED"
            ) from e

        if not capture.is_completed:
            self._fail(payment, f"Capture status {capture.status}")
            logger.warning(f"Capture of order {order_id} returned status {capture.status}")
            raise BadRequestError(
                "Payment capture failed",
                details={'status': capture.status},
                code="PAYMENT_CAPTURE_FAILED"
            )

        payment, conflict = with_db_retry(
            'payment_capture',
            lambda: self._settle(order_id, session.id, payment.id if payment else None, capture.capture_id),
        )

        if conflict is not None:
            logger.error(
                f"Order {order_id} captured but not settled: {conflict}",
                extra={'session_id': str(session.id), 'capture_id': capture.capture_id}
            )
            if payment is not None:
                publish_payment_event(EventType.PAYMENT_REFUND_REQUIRED, payment)
            raise ConflictError(
                conflict,
                details={
                    'order_id': order_id,
                    'capture_id': capture.capture_id,
                    'refund_required': True,
                }
            )

        if payment is not None:
            publish_payment_event(EventType.PAYMENT_COMPLETED, payment)

        logger.info(f"Captured order {order_id} for session {session.id}")
        return {
            'success': True,
            'payment_id': order_id,
            'capture_id': capture.capture_id,
        }

    @staticmethod
    def _prior_capture(
        order_id: str,
        session: Session,
        payment: Optional[Payment]
    ) -> Optional[Dict[str, Any]]:
        """The result of an earlier capture of ``order_id``, if it settled."""
        if not (session.is_paid and session.payment_id == order_id):
            return None
        return {
            'success': True,
            'payment_id': order_id,
            'capture_id': payment.paypal_capture_id if payment else None,
        }

    def _fresh_prior_capture(
        self,
        order_id: str,
        session_id: uuid.UUID,
        payment: Optional[Payment]
    ) -> Optional[Dict[str, Any]]:
        session = Session.objects.get(id=session_id)
        if payment is not None:
            payment.refresh_from_db()
        return self._prior_capture(order_id, session, payment)

    def _settle(
        self,
        order_id: str,
        session_id: uuid.UUID,
        payment_id: Optional[uuid.UUID],
        capture_id: Optional[str]
    ) -> Tuple[Optional[Payment], Optional[str]]:
        """
        Payment, session and time slot change together or not at all.

        Returns:
            (payment, conflict): ``conflict`` names why the session could not
            take the capture (cancelled, or paid by another order), in which
            case only the payment is recorded and the session and slot are
            left untouched.
        """
        with transaction.atomic():
            session = Session.objects.select_for_update().get(id=session_id)

            payment = None
            if payment_id is not None:
                payment = Payment.objects.select_for_update().get(id=payment_id)
                if payment.status != Payment.Status.COMPLETED:
                    payment.mark_completed(capture_id)

            conflict = None
            if session.is_cancelled:
                conflict = "Session cancelled during payment"
            elif session.is_paid and session.payment_id != order_id:
                conflict = "Session already paid by another order"

            if conflict is not None:
                if payment is not None:
                    payment.failure_reason = f"Refund required: {conflict}"
                    payment.save(update_fields=['failure_reason', 'updated_at'])
                return payment, conflict

            if not session.is_paid:
                session.is_paid = True
                session.payment_id = order_id
                update_fields = ['is_paid', 'payment_id', 'updated_at']
                if session.status == Session.Status.SCHEDULED:
                    session.status = Session.Status.CONFIRMED
                    update_fields.append('status')
                session.save(update_fields=update_fields)

            self.time_slots.mark_unavailable(session.time_slot_id)

        return payment, None

    @staticmethod
    def _fail(payment: Optional[Payment], reason: str) -> None:
        if payment is not None and payment.mark_failed(reason):
            publish_payment_event(EventType.PAYMENT_FAILED, payment)

    @staticmethod
    def _parse_amount(amount) -> Decimal:
        try:
            return round_decimal(amount)
        except (InvalidOperation, TypeError, ValueError):
            raise BadRequestError("Invalid amount", field="amount")

    # ==========================================================================
    # Queries and administration
    # ==========================================================================

    def get_payment(self, payment_id: uuid.UUID) -> Payment:
        try:
            return Payment.objects.get(id=payment_id)
        except Payment.DoesNotExist:
            raise NotFoundError("Payment not found", resource_id=payment_id)

    def find_by_user(self, user_id: uuid.UUID) -> List[Payment]:
        return list(Payment.objects.filter(user_id=user_id).order_by('-created_at'))

    @transaction.atomic
    def update_status(self, payment_id: uuid.UUID, status: str, role: str) -> Payment:
        """Administrative override, e.g. recording a refund."""
        if role != UserRole.ADMIN.value:
            raise ForbiddenError("Only administrators can update payment status")

        if status not in Payment.Status.values:
            raise BadRequestError(f"Invalid payment status: {status}", field="status")

        payment = self.get_payment(payment_id)
        previous = payment.status
        payment.status = status
        update_fields = ['status', 'updated_at']
        if status == Payment.Status.COMPLETED and payment.completed_at is None:
            payment.completed_at = timezone.now()
            update_fields.append('completed_at')
        payment.save(update_fields=update_fields)

        logger.warning(
            f"Payment {payment_id} status overridden: {previous} -> {status}",
            extra={'payment_id': str(payment_id)}
        )
        publish_payment_event(EventType.PAYMENT_STATUS_OVERRIDDEN, payment)
        return payment
