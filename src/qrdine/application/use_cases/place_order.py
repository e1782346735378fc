from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from qrdine.application.dto.requests import PlaceOrderRequest
from qrdine.application.dto.responses import OrderResponse
from qrdine.application.mappers.event_envelope import ORDER_PLACED
from qrdine.application.mappers.order_mapper import to_order_response
from qrdine.application.metrics.order_lifecycle import record_order_placed
from qrdine.application.ports.publisher import EventPublisher
from qrdine.application.ports.repositories import (
    MenuRepository,
    OrderRepository,
    TableRepository,
)
from qrdine.application.use_cases.context import TraceContext
from qrdine.application.use_cases.order_events import publish_order_event
from qrdine.domain.common.ids import MenuItemId, OrderId, OrderItemId, RestaurantId, UserId
from qrdine.domain.order.entities import OrderItem, create_pending_order

logger = logging.getLogger(__name__)


class TableNotFoundError(Exception):
    pass


class MenuItemUnavailableError(Exception):
    pass


class PlaceOrder:
    """Turns a cart snapshot into a persisted order.

    Unit prices come from the restaurant's current menu, not from the request;
    the price in effect at submission is snapshotted onto each order item so
    later menu changes leave historical orders untouched.
    """

    def __init__(
        self,
        menu_repository: MenuRepository,
        table_repository: TableRepository,
        order_repository: OrderRepository,
        publisher: EventPublisher,
    ) -> None:
        self._menu_repository = menu_repository
        self._table_repository = table_repository
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        request_dto: PlaceOrderRequest,
        user_id: UserId | None,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        restaurant_id = RestaurantId(request_dto.restaurant_id)
        if not self._table_repository.exists(restaurant_id, request_dto.table_number):
            raise TableNotFoundError(
                f"table not found for restaurant_id={restaurant_id}, "
                f"table_number={request_dto.table_number}"
            )

        requested_ids = [MenuItemId(line.id) for line in request_dto.items]
        menu_items = {
            str(item.item_id): item
            for item in self._menu_repository.get_items(restaurant_id, requested_ids)
        }

        order_items: list[OrderItem] = []
        for request_item in request_dto.items:
            if request_item.quantity < 1:
                raise MenuItemUnavailableError("quantity must be >= 1")

            menu_item = menu_items.get(request_item.id)
            if menu_item is None or menu_item.restaurant_id != restaurant_id:
                raise MenuItemUnavailableError(f"menu item {request_item.id} does not exist")
            if not menu_item.is_available:
                raise MenuItemUnavailableError(f"menu item {request_item.id} is unavailable")

            unit_price = menu_item.price_money
            if (
                request_item.price is not None
                and round(request_item.price * 100) != unit_price.amount_cents
            ):
                logger.warning(
                    "order_item_price_mismatch",
                    extra={
                        "restaurant_id": str(restaurant_id),
                        "menu_item_id": request_item.id,
                        "submitted_price": request_item.price,
                        "menu_price_cents": unit_price.amount_cents,
                    },
                )

            order_items.append(
                OrderItem(
                    item_id=OrderItemId(f"oit_{uuid4().hex[:12]}"),
                    menu_item_id=menu_item.item_id,
                    name=menu_item.name,
                    quantity=request_item.quantity,
                    unit_price=unit_price,
                    line_total=unit_price.times(request_item.quantity),
                )
            )

        now = datetime.now(timezone.utc)
        order = create_pending_order(
            order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
            restaurant_id=restaurant_id,
            table_number=request_dto.table_number,
            user_id=user_id,
            items=order_items,
            now=now,
        )
        self._order_repository.add(order)
        logger.info(
            "order_placed",
            extra={
                "order_id": str(order.order_id),
                "restaurant_id": str(restaurant_id),
                "items_count": len(order.items),
            },
        )

        record_order_placed(order)
        publish_order_event(self._publisher, ORDER_PLACED, order, trace_ctx, occurred_at=now)
        return to_order_response(order)
