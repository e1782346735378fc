from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from qrdine.domain.common.ids import MenuItemId, OrderId, OrderItemId, RestaurantId, UserId
from qrdine.domain.common.money import Money


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


@dataclass(frozen=True)
class OrderItem:
    item_id: OrderItemId
    menu_item_id: MenuItemId
    name: str
    quantity: int
    unit_price: Money
    line_total: Money

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        if self.unit_price.currency != self.line_total.currency:
            raise ValueError("line_total currency must match unit_price currency")
        expected_total = self.unit_price.amount_cents * self.quantity
        if self.line_total.amount_cents != expected_total:
            raise ValueError("line_total must equal unit_price * quantity")


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    restaurant_id: RestaurantId
    table_number: int
    user_id: UserId | None
    status: OrderStatus
    items: list[OrderItem]
    total: Money
    created_at: datetime
    payment_reference: str | None = None

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("order must contain at least one item")
        item_currency = self.items[0].line_total.currency
        if self.total.currency != item_currency:
            raise ValueError("order total currency must match item currency")
        expected_total = sum(item.line_total.amount_cents for item in self.items)
        if self.total.amount_cents != expected_total:
            raise ValueError("order total must equal sum of item totals")

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID

    def start_checkout(self, payment_reference: str) -> Order:
        if self.status != OrderStatus.PENDING:
            raise OrderTransitionError(
                f"cannot start checkout from status={self.status.value}"
            )
        return replace(self, payment_reference=payment_reference)

    def mark_paid(self, payment_reference: str) -> Order:
        if self.status == OrderStatus.PAID:
            raise OrderTransitionError("order is already paid")
        return replace(self, status=OrderStatus.PAID, payment_reference=payment_reference)

    def release_checkout(self) -> Order:
        if self.status != OrderStatus.PENDING:
            raise OrderTransitionError(
                f"cannot release checkout from status={self.status.value}"
            )
        return replace(self, payment_reference=None)


def create_pending_order(
    order_id: OrderId,
    restaurant_id: RestaurantId,
    table_number: int,
    user_id: UserId | None,
    items: list[OrderItem],
    now: datetime,
) -> Order:
    if not items:
        raise ValueError("order must contain at least one item")

    currency = items[0].line_total.currency
    total = Money(
        amount_cents=sum(item.line_total.amount_cents for item in items),
        currency=currency,
    )
    return Order(
        order_id=order_id,
        restaurant_id=restaurant_id,
        table_number=table_number,
        user_id=user_id,
        status=OrderStatus.PENDING,
        items=items,
        total=total,
        created_at=now,
    )


class OrderTransitionError(Exception):
    pass
