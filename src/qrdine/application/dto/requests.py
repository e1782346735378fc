from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class PlaceOrderItemRequest(CamelBaseModel):
    id: str = Field(min_length=1)
    quantity: int
    price: float | None = None


class PlaceOrderRequest(CamelBaseModel):
    restaurant_id: str = Field(min_length=1)
    table_number: int = Field(ge=1)
    items: list[PlaceOrderItemRequest] = Field(min_length=1)


class CheckoutRequest(CamelBaseModel):
    order_id: str = Field(min_length=1)
    success_url: str | None = None
    cancel_url: str | None = None


class AddCartItemRequest(CamelBaseModel):
    item_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    restaurant_id: str = Field(min_length=1)
    table_number: int = Field(ge=1)


class UpdateCartItemRequest(CamelBaseModel):
    quantity: int
