from __future__ import annotations

from qrdine.application.dto.responses import MenuItemResponse
from qrdine.domain.menu.entities import MenuItem


def to_menu_item_response(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse(
        id=str(item.item_id),
        name=item.name,
        description=item.description,
        price=item.price_money.as_decimal_amount(),
        priceCents=item.price_money.amount_cents,
        currency=item.price_money.currency,
        category=item.category.value,
        image=item.image,
    )


def to_menu_response(items: list[MenuItem]) -> list[MenuItemResponse]:
    return [to_menu_item_response(item) for item in items]
