from __future__ import annotations

import os

from fastapi import APIRouter, Header, Request
from starlette.concurrency import run_in_threadpool

from qrdine.api.middleware.request_context import get_request_id
from qrdine.api.session import discard_cart
from qrdine.application.dto.requests import CheckoutRequest
from qrdine.application.dto.responses import CheckoutResponse, WebhookAckResponse
from qrdine.application.use_cases.confirm_payment import ConfirmPayment
from qrdine.application.use_cases.context import TraceContext
from qrdine.application.use_cases.initiate_checkout import DEFAULT_APP_BASE_URL, InitiateCheckout
from qrdine.domain.common.ids import OrderId
from qrdine.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository
from qrdine.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from qrdine.infrastructure.messaging.redis_events import RedisEventPublisher
from qrdine.infrastructure.observability.otel import current_trace_id
from qrdine.infrastructure.payments.factory import build_checkout_gateway

router = APIRouter(tags=["checkout"])


def _app_base_url() -> str:
    return os.getenv("APP_BASE_URL", DEFAULT_APP_BASE_URL).rstrip("/")


def _initiate_checkout_use_case() -> InitiateCheckout:
    return InitiateCheckout(
        order_repository=SqlAlchemyOrderRepository(),
        menu_repository=SqlAlchemyMenuRepository(),
        gateway=build_checkout_gateway(),
        publisher=RedisEventPublisher(),
        app_base_url=_app_base_url(),
    )


def _confirm_payment_use_case() -> ConfirmPayment:
    return ConfirmPayment(
        order_repository=SqlAlchemyOrderRepository(),
        gateway=build_checkout_gateway(),
        publisher=RedisEventPublisher(),
    )


def _trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())


@router.post("/v1/checkout", response_model=CheckoutResponse)
def initiate_checkout(
    request_dto: CheckoutRequest,
    request: Request,
) -> CheckoutResponse:
    result = _initiate_checkout_use_case().execute(
        order_id=OrderId(request_dto.order_id),
        trace_ctx=_trace_context(),
        success_url=request_dto.success_url,
        cancel_url=request_dto.cancel_url,
    )
    discard_cart(request)
    return result


@router.post("/v1/checkout/webhook", response_model=WebhookAckResponse)
async def checkout_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
) -> WebhookAckResponse:
    payload = await request.body()
    return await run_in_threadpool(
        _confirm_payment_use_case().execute,
        payload=payload,
        signature=stripe_signature,
        trace_ctx=_trace_context(),
    )
