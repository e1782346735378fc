from __future__ import annotations

import logging
from urllib.parse import urlencode

from qrdine.application.dto.responses import CheckoutResponse
from qrdine.application.mappers.event_envelope import ORDER_PAID
from qrdine.application.metrics.order_lifecycle import (
    record_checkout_session,
    record_payment_confirmed,
)
from qrdine.application.ports.payments import (
    CheckoutGateway,
    CheckoutLineItem,
    CheckoutSession,
    CheckoutSessionRequest,
)
from qrdine.application.ports.publisher import EventPublisher
from qrdine.application.ports.repositories import (
    MenuRepository,
    OptimisticConcurrencyError,
    OrderRepository,
)
from qrdine.application.use_cases.context import TraceContext
from qrdine.application.use_cases.order_events import publish_order_event
from qrdine.domain.common.ids import OrderId
from qrdine.domain.order.entities import Order
from qrdine.domain.table.entities import table_qr_code

logger = logging.getLogger(__name__)

DEFAULT_APP_BASE_URL = "http://localhost:3000"


class OrderNotFoundError(Exception):
    pass


class OrderAlreadyPaidError(Exception):
    pass


class CheckoutConflictError(Exception):
    pass


class InitiateCheckout:
    """Hands an order to the configured checkout gateway.

    The gateway decides between a hosted provider session and a mock
    settlement; this use case only guarantees that the order never ends up
    with a reference the provider does not know about, and that a paid order
    is never sent to checkout again.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        menu_repository: MenuRepository,
        gateway: CheckoutGateway,
        publisher: EventPublisher,
        app_base_url: str = DEFAULT_APP_BASE_URL,
    ) -> None:
        self._order_repository = order_repository
        self._menu_repository = menu_repository
        self._gateway = gateway
        self._publisher = publisher
        self._app_base_url = app_base_url.rstrip("/")

    @property
    def _mode(self) -> str:
        return "mock" if self._gateway.is_mock else "provider"

    def execute(
        self,
        order_id: OrderId,
        trace_ctx: TraceContext,
        success_url: str | None = None,
        cancel_url: str | None = None,
    ) -> CheckoutResponse:
        order = self._order_repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        if order.is_paid:
            raise OrderAlreadyPaidError(f"order {order_id} is already paid")

        if order.payment_reference and not self._gateway.is_mock:
            existing = self._gateway.get_session(order.payment_reference)
            if existing is not None and existing.is_open:
                record_checkout_session(self._mode, "reused")
                return CheckoutResponse(sessionId=existing.session_id, url=existing.url)
            if existing is not None and existing.is_complete:
                self._settle_completed(order, existing.session_id, trace_ctx)
                raise OrderAlreadyPaidError(f"order {order_id} is already paid")

        session = self._gateway.create_session(
            self._session_request(
                order,
                success_url=success_url or self._default_success_url(order),
                cancel_url=cancel_url or self._default_cancel_url(order),
            )
        )
        if session.is_mock:
            logger.info("checkout_mock_settlement", extra={"order_id": str(order_id)})
            updated = order.mark_paid(session.session_id)
        else:
            updated = order.start_checkout(session.session_id)

        try:
            persisted = self._order_repository.update_payment(
                updated,
                expected_reference=order.payment_reference,
            )
        except OptimisticConcurrencyError as exc:
            self._expire_quietly(session)
            record_checkout_session(self._mode, "conflict")
            raise CheckoutConflictError(
                f"order {order_id} was modified during checkout, retry the request"
            ) from exc
        except Exception:
            self._expire_quietly(session)
            record_checkout_session(self._mode, "failed")
            raise

        record_checkout_session(self._mode, "created")
        if persisted.is_paid:
            record_payment_confirmed(persisted, mode=self._mode)
            publish_order_event(self._publisher, ORDER_PAID, persisted, trace_ctx)

        return CheckoutResponse(
            sessionId=session.session_id,
            url=session.url,
            isMock=session.is_mock,
        )

    def _settle_completed(self, order: Order, reference: str, trace_ctx: TraceContext) -> None:
        # Paid at the provider before the completion webhook arrived.
        try:
            paid = self._order_repository.update_payment(
                order.mark_paid(reference),
                expected_reference=reference,
            )
        except OptimisticConcurrencyError as exc:
            raise CheckoutConflictError(
                f"order {order.order_id} was modified during checkout, retry the request"
            ) from exc

        logger.info(
            "order_paid",
            extra={"order_id": str(paid.order_id), "session_id": reference},
        )
        record_checkout_session(self._mode, "already_paid")
        record_payment_confirmed(paid, mode=self._mode)
        publish_order_event(self._publisher, ORDER_PAID, paid, trace_ctx)

    def _default_success_url(self, order: Order) -> str:
        return f"{self._app_base_url}/order-success/{order.order_id}"

    def _default_cancel_url(self, order: Order) -> str:
        # Back to the menu of the table the order was placed at.
        qr_code = table_qr_code(order.restaurant_id, order.table_number)
        query = urlencode({"qr": qr_code})
        return f"{self._app_base_url}/menu?{query}"

    def _session_request(
        self,
        order: Order,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSessionRequest:
        menu_items = {
            str(item.item_id): item
            for item in self._menu_repository.get_items(
                order.restaurant_id,
                [order_item.menu_item_id for order_item in order.items],
            )
        }

        line_items: list[CheckoutLineItem] = []
        for order_item in order.items:
            menu_item = menu_items.get(str(order_item.menu_item_id))
            line_items.append(
                CheckoutLineItem(
                    name=order_item.name,
                    description=menu_item.description if menu_item else None,
                    image=menu_item.image if menu_item else None,
                    unit_amount_cents=order_item.unit_price.amount_cents,
                    currency=order_item.unit_price.currency,
                    quantity=order_item.quantity,
                )
            )

        return CheckoutSessionRequest(
            order_id=str(order.order_id),
            line_items=line_items,
            success_url=success_url,
            cancel_url=cancel_url,
            metadata={"orderId": str(order.order_id)},
        )

    def _expire_quietly(self, session: CheckoutSession) -> None:
        if session.is_mock:
            return
        try:
            self._gateway.expire_session(session.session_id)
        except Exception:
            logger.exception(
                "checkout_session_expire_failed",
                extra={"session_id": session.session_id},
            )
