from __future__ import annotations

from fastapi import APIRouter, Request

from qrdine.api.session import store_cart, stored_cart_payload
from qrdine.application.dto.requests import AddCartItemRequest, UpdateCartItemRequest
from qrdine.application.dto.responses import CartResponse
from qrdine.application.mappers.cart_mapper import to_cart_response
from qrdine.application.use_cases.cart import (
    AddCartItem,
    LoadCart,
    clear_cart,
    remove_cart_item,
    update_cart_item,
)
from qrdine.domain.cart.entities import Cart
from qrdine.domain.common.ids import MenuItemId
from qrdine.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository

router = APIRouter(tags=["cart"])


def _load_cart_use_case() -> LoadCart:
    return LoadCart(menu_repository=SqlAlchemyMenuRepository())


def _add_cart_item_use_case() -> AddCartItem:
    return AddCartItem(menu_repository=SqlAlchemyMenuRepository())


def _current_cart(request: Request) -> Cart:
    return _load_cart_use_case().execute(stored_cart_payload(request))


@router.get("/v1/cart", response_model=CartResponse)
def get_cart(request: Request) -> CartResponse:
    return to_cart_response(_current_cart(request))


@router.post("/v1/cart/items", response_model=CartResponse)
def add_cart_item(request_dto: AddCartItemRequest, request: Request) -> CartResponse:
    cart = _add_cart_item_use_case().execute(_current_cart(request), request_dto)
    store_cart(request, cart)
    return to_cart_response(cart)


@router.patch("/v1/cart/items/{item_id}", response_model=CartResponse)
def update_item_quantity(
    item_id: str,
    request_dto: UpdateCartItemRequest,
    request: Request,
) -> CartResponse:
    # Items not in the cart are left alone, as with removal.
    cart = update_cart_item(_current_cart(request), MenuItemId(item_id), request_dto.quantity)
    store_cart(request, cart)
    return to_cart_response(cart)


@router.delete("/v1/cart/items/{item_id}", response_model=CartResponse)
def remove_item(item_id: str, request: Request) -> CartResponse:
    cart = remove_cart_item(_current_cart(request), MenuItemId(item_id))
    store_cart(request, cart)
    return to_cart_response(cart)


@router.delete("/v1/cart", response_model=CartResponse)
def delete_cart(request: Request) -> CartResponse:
    cart = clear_cart(_current_cart(request))
    store_cart(request, cart)
    return to_cart_response(cart)
