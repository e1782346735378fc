from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from qrdine.domain.common.ids import MenuItemId, RestaurantId
from qrdine.domain.common.money import Money


class MenuCategory(str, Enum):
    STARTERS = "STARTERS"
    MAIN = "MAIN"
    DESSERT = "DESSERT"
    DRINKS = "DRINKS"
    ALCOHOLIC_DRINKS = "ALCOHOLIC_DRINKS"
    SNACKS = "SNACKS"


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    restaurant_id: RestaurantId
    name: str
    description: str | None
    price_money: Money
    category: MenuCategory
    image: str | None
    is_available: bool

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
