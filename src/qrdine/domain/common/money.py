from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CURRENCY = "GBP"


@dataclass(frozen=True)
class Money:
    amount_cents: int
    currency: str

    def __post_init__(self) -> None:
        if self.amount_cents < 0:
            raise ValueError("amount_cents must be >= 0")
        if len(self.currency) != 3 or not self.currency.isalpha() or not self.currency.isupper():
            raise ValueError("currency must be a 3-letter uppercase code")

    def times(self, quantity: int) -> Money:
        return Money(amount_cents=self.amount_cents * quantity, currency=self.currency)

    def as_decimal_amount(self) -> float:
        return self.amount_cents / 100


def sum_money(amounts: list[Money], currency: str = DEFAULT_CURRENCY) -> Money:
    if not amounts:
        return Money(amount_cents=0, currency=currency)
    first_currency = amounts[0].currency
    if any(amount.currency != first_currency for amount in amounts):
        raise ValueError("cannot sum amounts in different currencies")
    return Money(amount_cents=sum(amount.amount_cents for amount in amounts), currency=first_currency)
