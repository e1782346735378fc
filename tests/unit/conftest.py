from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

import pytest

from qrdine.application.ports.payments import (
    CheckoutSession,
    CheckoutSessionRequest,
    InvalidWebhookError,
    PaymentEvent,
    PaymentProviderError,
    SESSION_EXPIRED,
)
from qrdine.application.ports.repositories import (
    OptimisticConcurrencyError,
    OrderHistoryData,
    TableLookupData,
)
from qrdine.domain.common.ids import (
    MenuItemId,
    OrderId,
    OrderItemId,
    RestaurantId,
    TableId,
    UserId,
)
from qrdine.domain.common.money import Money
from qrdine.domain.menu.entities import MenuCategory, MenuItem
from qrdine.domain.order.entities import Order, OrderItem, OrderStatus, create_pending_order
from qrdine.domain.table.entities import Restaurant, Table, table_qr_code

RESTAURANT_ID = RestaurantId("rst_001")


def make_menu_item(
    item_id: str,
    name: str,
    price_cents: int,
    category: MenuCategory = MenuCategory.MAIN,
    is_available: bool = True,
    restaurant_id: str = "rst_001",
) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        restaurant_id=RestaurantId(restaurant_id),
        name=name,
        description=f"{name} description",
        price_money=Money(amount_cents=price_cents, currency="GBP"),
        category=category,
        image=None,
        is_available=is_available,
    )


class FakeMenuRepository:
    def __init__(self, items: list[MenuItem]) -> None:
        self.items = list(items)

    def list_available_items(self, restaurant_id: RestaurantId) -> list[MenuItem]:
        return [
            item
            for item in self.items
            if item.restaurant_id == restaurant_id and item.is_available
        ]

    def get_items(self, restaurant_id: RestaurantId, item_ids: list[MenuItemId]) -> list[MenuItem]:
        wanted = {str(item_id) for item_id in item_ids}
        return [
            item
            for item in self.items
            if item.restaurant_id == restaurant_id and str(item.item_id) in wanted
        ]


class FakeTableRepository:
    def __init__(self, restaurant: Restaurant, table_numbers: list[int]) -> None:
        self._restaurant = restaurant
        self._tables = {
            table_qr_code(restaurant.restaurant_id, number): Table(
                table_id=TableId(f"tbl_{number:03d}"),
                restaurant_id=restaurant.restaurant_id,
                table_number=number,
                qr_code=table_qr_code(restaurant.restaurant_id, number),
            )
            for number in table_numbers
        }

    def get_by_qr_code(self, qr_code: str) -> TableLookupData | None:
        table = self._tables.get(qr_code)
        if table is None:
            return None
        return TableLookupData(table=table, restaurant=self._restaurant)

    def exists(self, restaurant_id: RestaurantId, table_number: int) -> bool:
        return any(
            table.restaurant_id == restaurant_id and table.table_number == table_number
            for table in self._tables.values()
        )


class FakeOrderRepository:
    def __init__(self, restaurant_name: str = "The Gourmet Table") -> None:
        self.orders: dict[str, Order] = {}
        self.restaurant_name = restaurant_name
        self.fail_update_with: Exception | None = None
        self.update_calls: list[tuple[Order, str | None]] = []

    def add(self, order: Order) -> None:
        self.orders[str(order.order_id)] = order

    def get(self, order_id: OrderId) -> Order | None:
        return self.orders.get(str(order_id))

    def list_for_user(self, user_id: UserId) -> list[OrderHistoryData]:
        return [
            OrderHistoryData(order=order, restaurant_name=self.restaurant_name)
            for order in self.orders.values()
            if order.user_id == user_id
        ]

    def update_payment(self, order: Order, expected_reference: str | None) -> Order:
        self.update_calls.append((order, expected_reference))
        if self.fail_update_with is not None:
            raise self.fail_update_with
        current = self.orders.get(str(order.order_id))
        if (
            current is None
            or current.status != OrderStatus.PENDING
            or current.payment_reference != expected_reference
        ):
            raise OptimisticConcurrencyError(f"order {order.order_id} payment state changed")
        self.orders[str(order.order_id)] = order
        return order


@dataclass
class FakePublisher:
    messages: list[tuple[str, str]] = field(default_factory=list)
    fail: bool = False

    def publish(self, channel: str, message: str) -> None:
        if self.fail:
            raise ConnectionError("redis unavailable")
        self.messages.append((channel, message))


class FakeCheckoutGateway:
    is_mock = False

    def __init__(self) -> None:
        self.created: list[CheckoutSessionRequest] = []
        self.expired: list[str] = []
        self.sessions: dict[str, CheckoutSession] = {}
        self.next_event: PaymentEvent | None = None
        self.fail_create = False

    def create_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        if self.fail_create:
            raise PaymentProviderError("provider is down")
        self.created.append(request)
        session = CheckoutSession(
            session_id=f"cs_test_{len(self.created)}",
            url=f"https://checkout.stripe.test/pay/cs_test_{len(self.created)}",
        )
        self.sessions[session.session_id] = session
        return session

    def settle(self, session_id: str, status: str) -> None:
        self.sessions[session_id] = replace(self.sessions[session_id], status=status)

    def get_session(self, session_id: str) -> CheckoutSession | None:
        return self.sessions.get(session_id)

    def expire_session(self, session_id: str) -> None:
        self.expired.append(session_id)
        if session_id in self.sessions:
            self.settle(session_id, SESSION_EXPIRED)

    def parse_event(self, payload: bytes, signature: str | None) -> PaymentEvent:
        if signature != "valid" or self.next_event is None:
            raise InvalidWebhookError("webhook signature verification failed")
        return self.next_event


def make_order(
    order_id: str = "ord_001",
    user_id: str | None = "usr_001",
    quantities: tuple[tuple[str, str, int, int], ...] = (("itm_001", "Prawn Tempura", 899, 2),),
    created_at: datetime | None = None,
) -> Order:
    items = [
        OrderItem(
            item_id=OrderItemId(f"oit_{index:03d}"),
            menu_item_id=MenuItemId(menu_item_id),
            name=name,
            quantity=quantity,
            unit_price=Money(amount_cents=price_cents, currency="GBP"),
            line_total=Money(amount_cents=price_cents * quantity, currency="GBP"),
        )
        for index, (menu_item_id, name, price_cents, quantity) in enumerate(quantities, start=1)
    ]
    return create_pending_order(
        order_id=OrderId(order_id),
        restaurant_id=RESTAURANT_ID,
        table_number=3,
        user_id=UserId(user_id) if user_id is not None else None,
        items=items,
        now=created_at or datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def restaurant() -> Restaurant:
    return Restaurant(
        restaurant_id=RESTAURANT_ID,
        name="The Gourmet Table",
        description="A fine dining experience with international cuisine",
        address="123 Main Street, London, UK",
    )


@pytest.fixture
def menu_repository() -> FakeMenuRepository:
    return FakeMenuRepository(
        [
            make_menu_item("itm_001", "Prawn Tempura", 899, MenuCategory.STARTERS),
            make_menu_item("itm_003", "Grilled Salmon", 2499),
            make_menu_item("itm_009", "Iced Tea", 399, MenuCategory.DRINKS),
            make_menu_item("itm_099", "Seasonal Special", 1999, is_available=False),
            make_menu_item("itm_500", "Other Place Burger", 1200, restaurant_id="rst_002"),
        ]
    )


@pytest.fixture
def table_repository(restaurant: Restaurant) -> FakeTableRepository:
    return FakeTableRepository(restaurant, table_numbers=list(range(1, 11)))


@pytest.fixture
def order_repository() -> FakeOrderRepository:
    return FakeOrderRepository()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def gateway() -> FakeCheckoutGateway:
    return FakeCheckoutGateway()


@pytest.fixture
def pending_order() -> Order:
    return make_order()


@pytest.fixture
def order_history(order_repository: FakeOrderRepository) -> FakeOrderRepository:
    base = datetime(2026, 10, 1, 18, 30, tzinfo=timezone.utc)
    order_repository.add(make_order("ord_old", created_at=base))
    order_repository.add(make_order("ord_new", created_at=base + timedelta(days=2)))
    order_repository.add(make_order("ord_mid", created_at=base + timedelta(days=1)))
    order_repository.add(make_order("ord_other", user_id="usr_999", created_at=base))
    order_repository.add(make_order("ord_guest", user_id=None, created_at=base))
    return order_repository


@pytest.fixture
def order_factory():
    return make_order


@pytest.fixture
def menu_item_factory():
    return make_menu_item
