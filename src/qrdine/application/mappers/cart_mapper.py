from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from qrdine.application.dto.responses import CartLineResponse, CartResponse, MoneyResponse
from qrdine.domain.cart.entities import Cart
from qrdine.domain.common.ids import MenuItemId, RestaurantId


@dataclass(frozen=True)
class StoredCart:
    """What the session cookie keeps of a cart: the binding and item quantities."""

    restaurant_id: RestaurantId | None = None
    table_number: int | None = None
    quantities: tuple[tuple[MenuItemId, int], ...] = ()


def to_session_payload(cart: Cart) -> dict[str, Any]:
    return {
        "restaurantId": cart.restaurant_id,
        "tableNumber": cart.table_number,
        "items": [[str(line.item_id), line.quantity] for line in cart.lines],
    }


def from_session_payload(payload: dict[str, Any] | None) -> StoredCart:
    if not payload:
        return StoredCart()

    try:
        quantities = tuple(
            (MenuItemId(str(item_id)), int(quantity))
            for item_id, quantity in payload.get("items", [])
        )
        restaurant_id = payload.get("restaurantId")
        table_number = payload.get("tableNumber")
        return StoredCart(
            restaurant_id=RestaurantId(str(restaurant_id)) if restaurant_id else None,
            table_number=int(table_number) if table_number is not None else None,
            quantities=quantities,
        )
    except (AttributeError, TypeError, ValueError):
        # A tampered or outdated cookie yields an empty cart rather than a failed request.
        return StoredCart()


def to_cart_response(cart: Cart) -> CartResponse:
    total = cart.total_price()
    return CartResponse(
        items=[
            CartLineResponse(
                id=str(line.item_id),
                name=line.name,
                price=line.unit_price.as_decimal_amount(),
                unitPrice=MoneyResponse(
                    amountCents=line.unit_price.amount_cents,
                    currency=line.unit_price.currency,
                ),
                quantity=line.quantity,
                category=line.category,
                image=line.image,
            )
            for line in cart.lines
        ],
        restaurantId=str(cart.restaurant_id) if cart.restaurant_id is not None else None,
        tableNumber=cart.table_number,
        totalPrice=MoneyResponse(amountCents=total.amount_cents, currency=total.currency),
        totalItems=cart.total_item_count(),
    )
