from __future__ import annotations

import logging

from qrdine.application.dto.responses import WebhookAckResponse
from qrdine.application.mappers.event_envelope import ORDER_PAID
from qrdine.application.metrics.order_lifecycle import record_payment_confirmed
from qrdine.application.ports.payments import CheckoutGateway, InvalidWebhookError
from qrdine.application.ports.publisher import EventPublisher
from qrdine.application.ports.repositories import OrderRepository
from qrdine.application.use_cases.context import TraceContext
from qrdine.application.use_cases.order_events import publish_order_event
from qrdine.domain.common.ids import OrderId

logger = logging.getLogger(__name__)

SESSION_COMPLETED = "checkout.session.completed"
SESSION_EXPIRED = "checkout.session.expired"


class ConfirmPayment:
    """Reconciles provider webhook events with the orders they belong to."""

    def __init__(
        self,
        order_repository: OrderRepository,
        gateway: CheckoutGateway,
        publisher: EventPublisher,
    ) -> None:
        self._order_repository = order_repository
        self._gateway = gateway
        self._publisher = publisher

    def execute(
        self,
        payload: bytes,
        signature: str | None,
        trace_ctx: TraceContext,
    ) -> WebhookAckResponse:
        if self._gateway.is_mock:
            raise InvalidWebhookError("no payment provider is configured")

        event = self._gateway.parse_event(payload, signature)
        if event.event_type not in {SESSION_COMPLETED, SESSION_EXPIRED}:
            return WebhookAckResponse()
        if not event.order_id:
            logger.warning("payment_event_without_order", extra={"session_id": event.session_id})
            return WebhookAckResponse()

        order = self._order_repository.get(OrderId(event.order_id))
        if order is None:
            logger.warning(
                "payment_event_unknown_order",
                extra={"order_id": event.order_id, "session_id": event.session_id},
            )
            return WebhookAckResponse()

        if order.is_paid:
            duplicate = order.payment_reference != event.session_id
            if event.event_type == SESSION_COMPLETED and duplicate:
                logger.error(
                    "payment_duplicate",
                    extra={
                        "order_id": str(order.order_id),
                        "session_id": event.session_id,
                        "paid_session_id": order.payment_reference,
                    },
                )
            return WebhookAckResponse()

        if event.event_type == SESSION_COMPLETED:
            superseded = order.payment_reference
            paid = self._order_repository.update_payment(
                order.mark_paid(event.session_id),
                expected_reference=order.payment_reference,
            )
            logger.info(
                "order_paid",
                extra={"order_id": str(paid.order_id), "session_id": event.session_id},
            )
            record_payment_confirmed(paid, mode="provider")
            publish_order_event(self._publisher, ORDER_PAID, paid, trace_ctx)
            if superseded and superseded != event.session_id:
                self._expire_superseded(superseded)
        elif order.payment_reference == event.session_id:
            self._order_repository.update_payment(
                order.release_checkout(),
                expected_reference=event.session_id,
            )
            logger.info(
                "checkout_session_released",
                extra={"order_id": str(order.order_id), "session_id": event.session_id},
            )

        return WebhookAckResponse()

    def _expire_superseded(self, session_id: str) -> None:
        try:
            self._gateway.expire_session(session_id)
        except Exception:
            logger.exception("checkout_session_expire_failed", extra={"session_id": session_id})
