from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from qrdine.domain.common.ids import MenuItemId, OrderId, RestaurantId, UserId
from qrdine.domain.menu.entities import MenuItem
from qrdine.domain.order.entities import Order
from qrdine.domain.table.entities import Restaurant, Table


class MenuRepository(Protocol):
    def list_available_items(self, restaurant_id: RestaurantId) -> list[MenuItem]: ...

    def get_items(
        self,
        restaurant_id: RestaurantId,
        item_ids: list[MenuItemId],
    ) -> list[MenuItem]: ...


class TableRepository(Protocol):
    def get_by_qr_code(self, qr_code: str) -> TableLookupData | None: ...

    def exists(self, restaurant_id: RestaurantId, table_number: int) -> bool: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def list_for_user(self, user_id: UserId) -> list[OrderHistoryData]: ...

    def update_payment(self, order: Order, expected_reference: str | None) -> Order: ...


class OptimisticConcurrencyError(Exception):
    pass


@dataclass(frozen=True)
class TableLookupData:
    table: Table
    restaurant: Restaurant


@dataclass(frozen=True)
class OrderHistoryData:
    order: Order
    restaurant_name: str
