from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from qrdine.api.middleware.request_context import get_request_id
from qrdine.application.ports.payments import InvalidWebhookError, PaymentProviderError
from qrdine.application.use_cases.cart import CartItemNotFoundError
from qrdine.application.use_cases.get_order import OrderNotFoundError as GetOrderNotFoundError
from qrdine.application.use_cases.initiate_checkout import (
    CheckoutConflictError,
    OrderAlreadyPaidError,
)
from qrdine.application.use_cases.initiate_checkout import (
    OrderNotFoundError as CheckoutOrderNotFoundError,
)
from qrdine.application.use_cases.order_history import UnauthorizedError
from qrdine.application.use_cases.place_order import MenuItemUnavailableError
from qrdine.application.use_cases.place_order import (
    TableNotFoundError as PlaceOrderTableNotFoundError,
)
from qrdine.application.use_cases.resolve_table import MissingQrCodeError
from qrdine.application.use_cases.resolve_table import (
    TableNotFoundError as ResolveTableNotFoundError,
)
from qrdine.domain.cart.entities import CartFullError, CartRestaurantMismatchError

logger = logging.getLogger(__name__)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 401:
        code = "UNAUTHORIZED"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": jsonable_encoder(validation_exc.errors())},
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_error",
        extra={"method": request.method, "path": request.url.path, "error_code": "INTERNAL_ERROR"},
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return _error_response(
        status_code=500,
        code="INTERNAL_ERROR",
        message="internal server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str]] = [
        (MissingQrCodeError, 400, "QR_CODE_REQUIRED"),
        (MenuItemUnavailableError, 400, "MENU_ITEM_UNAVAILABLE"),
        (InvalidWebhookError, 400, "INVALID_WEBHOOK"),
        (UnauthorizedError, 401, "UNAUTHORIZED"),
        (ResolveTableNotFoundError, 404, "TABLE_NOT_FOUND"),
        (PlaceOrderTableNotFoundError, 404, "TABLE_NOT_FOUND"),
        (GetOrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (CheckoutOrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (CartItemNotFoundError, 404, "MENU_ITEM_NOT_FOUND"),
        (CartRestaurantMismatchError, 409, "CART_RESTAURANT_MISMATCH"),
        (CartFullError, 409, "CART_FULL"),
        (OrderAlreadyPaidError, 409, "ORDER_ALREADY_PAID"),
        (CheckoutConflictError, 409, "CHECKOUT_CONFLICT"),
        (PaymentProviderError, 502, "PAYMENT_PROVIDER_ERROR"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
