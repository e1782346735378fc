from __future__ import annotations

from qrdine.application.dto.responses import OrderHistoryEntryResponse
from qrdine.application.mappers.order_mapper import to_order_history_response
from qrdine.application.ports.repositories import OrderRepository
from qrdine.domain.common.ids import UserId


class UnauthorizedError(Exception):
    pass


class ListOrderHistory:
    """Orders owned by the signed-in user, most recent first."""

    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, user_id: UserId | None) -> list[OrderHistoryEntryResponse]:
        if not user_id:
            raise UnauthorizedError("sign in to view order history")

        entries = self._order_repository.list_for_user(user_id)
        entries = sorted(entries, key=lambda entry: entry.order.created_at, reverse=True)
        return [to_order_history_response(entry) for entry in entries]
