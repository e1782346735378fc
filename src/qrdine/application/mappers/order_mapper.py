from __future__ import annotations

from qrdine.application.dto.responses import (
    MenuItemRefResponse,
    MoneyResponse,
    OrderHistoryEntryResponse,
    OrderItemResponse,
    OrderResponse,
    RestaurantNameResponse,
)
from qrdine.application.ports.repositories import OrderHistoryData
from qrdine.domain.common.money import Money
from qrdine.domain.order.entities import Order


def _money(value: Money) -> MoneyResponse:
    return MoneyResponse(amountCents=value.amount_cents, currency=value.currency)


def _order_fields(order: Order) -> dict[str, object]:
    return {
        "id": str(order.order_id),
        "restaurantId": str(order.restaurant_id),
        "tableNumber": order.table_number,
        "userId": str(order.user_id) if order.user_id is not None else None,
        "status": order.status.value,
        "totalAmount": order.total.as_decimal_amount(),
        "total": _money(order.total),
        "paymentReference": order.payment_reference,
        "items": [
            OrderItemResponse(
                id=str(item.item_id),
                menuItemId=str(item.menu_item_id),
                quantity=item.quantity,
                price=item.unit_price.as_decimal_amount(),
                unitPrice=_money(item.unit_price),
                lineTotal=_money(item.line_total),
                menuItem=MenuItemRefResponse(id=str(item.menu_item_id), name=item.name),
            )
            for item in order.items
        ],
        "createdAt": order.created_at,
    }


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(**_order_fields(order))


def to_order_history_response(entry: OrderHistoryData) -> OrderHistoryEntryResponse:
    return OrderHistoryEntryResponse(
        **_order_fields(entry.order),
        restaurant=RestaurantNameResponse(name=entry.restaurant_name),
    )
