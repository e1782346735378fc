from __future__ import annotations

from dataclasses import dataclass, replace

from qrdine.domain.common.ids import MenuItemId, RestaurantId
from qrdine.domain.common.money import DEFAULT_CURRENCY, Money, sum_money

MAX_CART_LINES = 50


@dataclass(frozen=True)
class CartLine:
    item_id: MenuItemId
    name: str
    unit_price: Money
    quantity: int
    category: str
    image: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)


@dataclass(frozen=True)
class Cart:
    """A diner's in-progress selection, bound to the table it was built at.

    Every mutation returns a new cart; the previous value is left untouched so
    callers can keep it when a later step fails.
    """

    lines: tuple[CartLine, ...] = ()
    restaurant_id: RestaurantId | None = None
    table_number: int | None = None

    def add_item(self, line: CartLine, restaurant_id: RestaurantId, table_number: int) -> Cart:
        if self.lines and self.restaurant_id is not None and self.restaurant_id != restaurant_id:
            raise CartRestaurantMismatchError(
                f"cart is bound to restaurant {self.restaurant_id}, "
                f"cannot add items from restaurant {restaurant_id}"
            )

        existing = self.find_line(line.item_id)
        if existing is None:
            if len(self.lines) >= MAX_CART_LINES:
                raise CartFullError(f"cart already holds {MAX_CART_LINES} different items")
            lines = (*self.lines, line)
        else:
            lines = tuple(
                replace(current, quantity=current.quantity + line.quantity)
                if current.item_id == line.item_id
                else current
                for current in self.lines
            )
        return Cart(lines=lines, restaurant_id=restaurant_id, table_number=table_number)

    def remove_item(self, item_id: MenuItemId) -> Cart:
        return replace(self, lines=tuple(line for line in self.lines if line.item_id != item_id))

    def update_quantity(self, item_id: MenuItemId, quantity: int) -> Cart:
        if quantity <= 0:
            return self.remove_item(item_id)
        return replace(
            self,
            lines=tuple(
                replace(line, quantity=quantity) if line.item_id == item_id else line
                for line in self.lines
            ),
        )

    def clear(self) -> Cart:
        return Cart()

    def find_line(self, item_id: MenuItemId) -> CartLine | None:
        for line in self.lines:
            if line.item_id == item_id:
                return line
        return None

    def total_price(self, currency: str = DEFAULT_CURRENCY) -> Money:
        return sum_money([line.line_total for line in self.lines], currency=currency)

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines


class CartRestaurantMismatchError(Exception):
    pass


class CartFullError(Exception):
    pass
