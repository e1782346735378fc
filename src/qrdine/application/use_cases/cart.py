from __future__ import annotations

import logging
from typing import Any

from qrdine.application.dto.requests import AddCartItemRequest
from qrdine.application.mappers.cart_mapper import from_session_payload
from qrdine.application.metrics.order_lifecycle import record_cart_mutation
from qrdine.application.ports.repositories import MenuRepository
from qrdine.domain.cart.entities import MAX_CART_LINES, Cart, CartLine
from qrdine.domain.common.ids import MenuItemId, RestaurantId
from qrdine.domain.menu.entities import MenuItem

logger = logging.getLogger(__name__)


class CartItemNotFoundError(Exception):
    pass


def _cart_line(menu_item: MenuItem, quantity: int) -> CartLine:
    return CartLine(
        item_id=menu_item.item_id,
        name=menu_item.name,
        unit_price=menu_item.price_money,
        quantity=quantity,
        category=menu_item.category.value,
        image=menu_item.image,
    )


class LoadCart:
    """Rebuilds the session cart from the current menu.

    The cookie only keeps item ids and quantities; names, prices and images
    come from the menu on every request. Lines whose item is gone or no
    longer available are dropped.
    """

    def __init__(self, menu_repository: MenuRepository) -> None:
        self._menu_repository = menu_repository

    def execute(self, payload: dict[str, Any] | None) -> Cart:
        stored = from_session_payload(payload)
        quantities = [
            (item_id, quantity)
            for item_id, quantity in stored.quantities[:MAX_CART_LINES]
            if quantity >= 1
        ]
        if stored.restaurant_id is None or not quantities:
            return Cart(restaurant_id=stored.restaurant_id, table_number=stored.table_number)

        menu_items = {
            item.item_id: item
            for item in self._menu_repository.get_items(
                stored.restaurant_id,
                [item_id for item_id, _ in quantities],
            )
            if item.is_available
        }

        lines: list[CartLine] = []
        for item_id, quantity in quantities:
            menu_item = menu_items.get(item_id)
            if menu_item is None:
                logger.info(
                    "cart_line_dropped",
                    extra={"item_id": str(item_id), "restaurant_id": str(stored.restaurant_id)},
                )
                continue
            lines.append(_cart_line(menu_item, quantity))

        return Cart(
            lines=tuple(lines),
            restaurant_id=stored.restaurant_id,
            table_number=stored.table_number,
        )


class AddCartItem:
    def __init__(self, menu_repository: MenuRepository) -> None:
        self._menu_repository = menu_repository

    def execute(self, cart: Cart, request_dto: AddCartItemRequest) -> Cart:
        restaurant_id = RestaurantId(request_dto.restaurant_id)
        item_id = MenuItemId(request_dto.item_id)
        matches = self._menu_repository.get_items(restaurant_id, [item_id])
        menu_item = next(
            (
                item
                for item in matches
                if item.item_id == item_id and item.restaurant_id == restaurant_id
            ),
            None,
        )
        if menu_item is None or not menu_item.is_available:
            raise CartItemNotFoundError(
                f"menu item {item_id} is not available at restaurant {restaurant_id}"
            )

        updated = cart.add_item(
            _cart_line(menu_item, request_dto.quantity),
            restaurant_id,
            request_dto.table_number,
        )
        record_cart_mutation("add")
        return updated


def remove_cart_item(cart: Cart, item_id: MenuItemId) -> Cart:
    record_cart_mutation("remove")
    return cart.remove_item(item_id)


def update_cart_item(cart: Cart, item_id: MenuItemId, quantity: int) -> Cart:
    record_cart_mutation("update")
    return cart.update_quantity(item_id, quantity)


def clear_cart(cart: Cart) -> Cart:
    record_cart_mutation("clear")
    return cart.clear()
