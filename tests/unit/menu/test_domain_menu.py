from __future__ import annotations

import pytest

from qrdine.domain.common.ids import MenuItemId, RestaurantId
from qrdine.domain.common.money import Money, sum_money
from qrdine.domain.menu.entities import MenuCategory, MenuItem


def test_money_rejects_negative_amounts_and_bad_currency() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=-1, currency="GBP")
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="gbp")


def test_money_decimal_amount_and_multiplication() -> None:
    price = Money(amount_cents=1499, currency="GBP")

    assert price.times(3) == Money(amount_cents=4497, currency="GBP")
    assert price.as_decimal_amount() == pytest.approx(14.99)


def test_sum_money_requires_single_currency() -> None:
    assert sum_money([]) == Money(amount_cents=0, currency="GBP")
    with pytest.raises(ValueError):
        sum_money([Money(amount_cents=1, currency="GBP"), Money(amount_cents=1, currency="USD")])


def test_menu_item_requires_name() -> None:
    with pytest.raises(ValueError):
        MenuItem(
            item_id=MenuItemId("itm_001"),
            restaurant_id=RestaurantId("rst_001"),
            name=" ",
            description=None,
            price_money=Money(amount_cents=100, currency="GBP"),
            category=MenuCategory.SNACKS,
            image=None,
            is_available=True,
        )
