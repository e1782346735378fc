from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from qrdine.domain.common.money import Money
from qrdine.domain.order.entities import Order

ORDER_PLACED = "order.placed"
ORDER_PAID = "order.paid"

CHANNEL_PREFIX = "events"


def restaurant_channel(restaurant_id: str) -> str:
    return f"{CHANNEL_PREFIX}:{restaurant_id}"


def _money(value: Money) -> dict[str, Any]:
    return {"amountCents": value.amount_cents, "currency": value.currency}


def order_event_payload(order: Order) -> dict[str, Any]:
    """Snapshot of an order as kitchen displays consume it."""
    return {
        "orderId": str(order.order_id),
        "tableNumber": order.table_number,
        "status": order.status.value,
        "paymentReference": order.payment_reference,
        "totalMoney": _money(order.total),
        "createdAt": order.created_at.isoformat(),
        "items": [
            {
                "id": str(item.item_id),
                "menuItemId": str(item.menu_item_id),
                "name": item.name,
                "quantity": item.quantity,
                "unitPrice": _money(item.unit_price),
            }
            for item in order.items
        ],
    }


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "restaurant_id": str(order.restaurant_id),
        "request_id": request_id,
        "trace_id": trace_id,
        "payload": order_event_payload(order),
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)
