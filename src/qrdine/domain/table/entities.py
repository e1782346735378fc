from __future__ import annotations

from dataclasses import dataclass

from qrdine.domain.common.ids import RestaurantId, TableId


@dataclass(frozen=True)
class Restaurant:
    restaurant_id: RestaurantId
    name: str
    description: str | None
    address: str | None
    phone: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class Table:
    table_id: TableId
    restaurant_id: RestaurantId
    table_number: int
    qr_code: str

    def __post_init__(self) -> None:
        if self.table_number < 1:
            raise ValueError("table_number must be >= 1")
        if not self.qr_code.strip():
            raise ValueError("qr_code must be non-empty")


def table_qr_code(restaurant_id: RestaurantId, table_number: int) -> str:
    return f"RESTAURANT_{restaurant_id}_TABLE_{table_number}"
