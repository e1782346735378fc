from __future__ import annotations

import pytest

from qrdine.application.dto.requests import AddCartItemRequest
from qrdine.application.mappers.cart_mapper import (
    from_session_payload,
    to_cart_response,
    to_session_payload,
)
from qrdine.application.use_cases.cart import (
    AddCartItem,
    CartItemNotFoundError,
    LoadCart,
    clear_cart,
    remove_cart_item,
    update_cart_item,
)
from qrdine.domain.cart.entities import Cart, CartRestaurantMismatchError
from qrdine.domain.common.ids import MenuItemId


def _add(item_id: str, quantity: int = 1, restaurant_id: str = "rst_001") -> AddCartItemRequest:
    return AddCartItemRequest.model_validate(
        {
            "itemId": item_id,
            "quantity": quantity,
            "restaurantId": restaurant_id,
            "tableNumber": 3,
        }
    )


def test_add_uses_menu_name_and_price(menu_repository) -> None:
    cart = AddCartItem(menu_repository=menu_repository).execute(Cart(), _add("itm_003", 2))

    line = cart.lines[0]
    assert line.name == "Grilled Salmon"
    assert line.unit_price.amount_cents == 2499
    assert line.category == "MAIN"
    assert cart.total_price().amount_cents == 4998


@pytest.mark.parametrize("item_id", ["itm_099", "itm_404"])
def test_add_rejects_unavailable_or_unknown_items(menu_repository, item_id) -> None:
    with pytest.raises(CartItemNotFoundError):
        AddCartItem(menu_repository=menu_repository).execute(Cart(), _add(item_id))


def test_add_from_second_restaurant_conflicts(menu_repository) -> None:
    use_case = AddCartItem(menu_repository=menu_repository)
    cart = use_case.execute(Cart(), _add("itm_001"))

    with pytest.raises(CartRestaurantMismatchError):
        use_case.execute(cart, _add("itm_500", restaurant_id="rst_002"))


def test_update_remove_and_clear(menu_repository) -> None:
    use_case = AddCartItem(menu_repository=menu_repository)
    cart = use_case.execute(Cart(), _add("itm_001"))
    cart = use_case.execute(cart, _add("itm_009", 2))

    cart = update_cart_item(cart, MenuItemId("itm_001"), 5)
    assert cart.total_item_count() == 7

    cart = remove_cart_item(cart, MenuItemId("itm_009"))
    assert [str(line.item_id) for line in cart.lines] == ["itm_001"]

    assert clear_cart(cart).is_empty


def test_session_payload_keeps_only_ids_and_quantities(menu_repository) -> None:
    use_case = AddCartItem(menu_repository=menu_repository)
    cart = use_case.execute(Cart(), _add("itm_001", 2))
    cart = use_case.execute(cart, _add("itm_003"))

    payload = to_session_payload(cart)

    assert payload == {
        "restaurantId": "rst_001",
        "tableNumber": 3,
        "items": [["itm_001", 2], ["itm_003", 1]],
    }
    assert LoadCart(menu_repository=menu_repository).execute(payload) == cart


def test_load_drops_items_no_longer_on_the_menu(menu_repository) -> None:
    payload = {
        "restaurantId": "rst_001",
        "tableNumber": 3,
        "items": [["itm_099", 1], ["itm_404", 2], ["itm_009", 3], ["itm_001", 0]],
    }

    cart = LoadCart(menu_repository=menu_repository).execute(payload)

    assert [(str(line.item_id), line.quantity) for line in cart.lines] == [("itm_009", 3)]
    assert cart.lines[0].unit_price.amount_cents == 399


def test_corrupt_session_payload_yields_empty_cart(menu_repository) -> None:
    legacy = {"restaurantId": "rst_001", "items": [{"id": "itm_001", "quantity": "many"}]}

    assert from_session_payload(legacy).quantities == ()
    assert LoadCart(menu_repository=menu_repository).execute(legacy) == Cart()
    assert LoadCart(menu_repository=menu_repository).execute(None) == Cart()


def test_cart_response_totals(menu_repository) -> None:
    use_case = AddCartItem(menu_repository=menu_repository)
    cart = use_case.execute(Cart(), _add("itm_003"))
    cart = use_case.execute(cart, _add("itm_001", 2))

    response = to_cart_response(cart)

    assert response.totalPrice.amountCents == 4297
    assert response.totalItems == 3
    assert response.restaurantId == "rst_001"
    assert response.tableNumber == 3
