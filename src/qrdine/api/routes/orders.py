from __future__ import annotations

from fastapi import APIRouter, Depends, status

from qrdine.api.middleware.request_context import get_request_id
from qrdine.api.session import current_user_id
from qrdine.application.dto.requests import PlaceOrderRequest
from qrdine.application.dto.responses import OrderHistoryEntryResponse, OrderResponse
from qrdine.application.use_cases.context import TraceContext
from qrdine.application.use_cases.get_order import GetOrder
from qrdine.application.use_cases.order_history import ListOrderHistory
from qrdine.application.use_cases.place_order import PlaceOrder
from qrdine.domain.common.ids import OrderId, UserId
from qrdine.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository
from qrdine.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from qrdine.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from qrdine.infrastructure.messaging.redis_events import RedisEventPublisher
from qrdine.infrastructure.observability.otel import current_trace_id

router = APIRouter(tags=["orders"])


def _place_order_use_case() -> PlaceOrder:
    return PlaceOrder(
        menu_repository=SqlAlchemyMenuRepository(),
        table_repository=SqlAlchemyTableRepository(),
        order_repository=SqlAlchemyOrderRepository(),
        publisher=RedisEventPublisher(),
    )


def _get_order_use_case() -> GetOrder:
    return GetOrder(order_repository=SqlAlchemyOrderRepository())


def _order_history_use_case() -> ListOrderHistory:
    return ListOrderHistory(order_repository=SqlAlchemyOrderRepository())


@router.post(
    "/v1/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def place_order(
    request_dto: PlaceOrderRequest,
    user_id: UserId | None = Depends(current_user_id),
) -> OrderResponse:
    return _place_order_use_case().execute(
        request_dto=request_dto,
        user_id=user_id,
        trace_ctx=TraceContext(trace_id=current_trace_id(), request_id=get_request_id()),
    )


@router.get("/v1/orders", response_model=list[OrderHistoryEntryResponse])
def list_orders(
    user_id: UserId | None = Depends(current_user_id),
) -> list[OrderHistoryEntryResponse]:
    return _order_history_use_case().execute(user_id)


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str) -> OrderResponse:
    return _get_order_use_case().execute(order_id=OrderId(order_id))
