"""Signed cookie session shared with the sign-in provider.

The session carries two things: ``user_id``, written by the authentication
provider after sign-in, and ``cart``, the item ids and quantities of the
diner's in-progress selection. Both stay on the client and must fit in a
single cookie.
"""

from __future__ import annotations

import os
from typing import Any

from fastapi import Request

from qrdine.application.mappers.cart_mapper import to_session_payload
from qrdine.domain.cart.entities import Cart
from qrdine.domain.common.ids import UserId

SESSION_COOKIE_NAME = "qrdine_session"
SESSION_USER_KEY = "user_id"
SESSION_CART_KEY = "cart"
SESSION_MAX_AGE_SECONDS = 14 * 24 * 60 * 60

_DEV_SECRET_KEY = "qrdine-dev-session-secret"


def _app_env() -> str:
    return os.getenv("APP_ENV", "dev").lower()


def session_secret_key() -> str:
    secret = os.getenv("SESSION_SECRET_KEY")
    if secret:
        return secret
    if _app_env() in {"dev", "test"}:
        return _DEV_SECRET_KEY
    raise RuntimeError("SESSION_SECRET_KEY is not set")


def session_https_only() -> bool:
    return _app_env() not in {"dev", "test"}


def current_user_id(request: Request) -> UserId | None:
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        return None
    return UserId(str(user_id))


def stored_cart_payload(request: Request) -> dict[str, Any] | None:
    payload = request.session.get(SESSION_CART_KEY)
    return payload if isinstance(payload, dict) else None


def store_cart(request: Request, cart: Cart) -> None:
    if cart.is_empty and cart.restaurant_id is None:
        request.session.pop(SESSION_CART_KEY, None)
        return
    request.session[SESSION_CART_KEY] = to_session_payload(cart)


def discard_cart(request: Request) -> None:
    request.session.pop(SESSION_CART_KEY, None)
