from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    currency: str


class RestaurantSummaryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    address: str | None = None


class TableLookupResponse(BaseModel):
    restaurantId: str
    restaurantName: str
    tableNumber: int
    restaurant: RestaurantSummaryResponse


class MenuItemResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    priceCents: int
    currency: str
    category: str
    image: str | None = None


class MenuItemRefResponse(BaseModel):
    id: str
    name: str


class OrderItemResponse(BaseModel):
    id: str
    menuItemId: str
    quantity: int
    price: float
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse
    menuItem: MenuItemRefResponse


class OrderResponse(BaseModel):
    id: str
    restaurantId: str
    tableNumber: int
    userId: str | None = None
    status: str
    totalAmount: float
    total: MoneyResponse
    paymentReference: str | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)
    createdAt: datetime


class RestaurantNameResponse(BaseModel):
    name: str


class OrderHistoryEntryResponse(OrderResponse):
    restaurant: RestaurantNameResponse


class CheckoutResponse(BaseModel):
    sessionId: str
    url: str | None = None
    isMock: bool = False


class CartLineResponse(BaseModel):
    id: str
    name: str
    price: float
    unitPrice: MoneyResponse
    quantity: int
    category: str
    image: str | None = None


class CartResponse(BaseModel):
    items: list[CartLineResponse] = Field(default_factory=list)
    restaurantId: str | None = None
    tableNumber: int | None = None
    totalPrice: MoneyResponse
    totalItems: int


class WebhookAckResponse(BaseModel):
    received: bool = True
