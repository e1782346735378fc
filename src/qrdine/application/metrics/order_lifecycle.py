from __future__ import annotations

from prometheus_client import Counter

from qrdine.domain.order.entities import Order

ORDERS_PLACED_TOTAL = Counter(
    "qrdine_orders_placed_total",
    "Total number of orders placed.",
    ["restaurant_id", "guest"],
)

CHECKOUT_SESSIONS_TOTAL = Counter(
    "qrdine_checkout_sessions_total",
    "Total number of checkout sessions handed out.",
    ["mode", "outcome"],
)

PAYMENTS_CONFIRMED_TOTAL = Counter(
    "qrdine_payments_confirmed_total",
    "Total number of orders marked paid.",
    ["restaurant_id", "mode"],
)

CART_MUTATIONS_TOTAL = Counter(
    "qrdine_cart_mutations_total",
    "Total number of cart mutations by action.",
    ["action"],
)


def record_order_placed(order: Order) -> None:
    ORDERS_PLACED_TOTAL.labels(
        restaurant_id=str(order.restaurant_id),
        guest=str(order.user_id is None).lower(),
    ).inc()


def record_checkout_session(mode: str, outcome: str) -> None:
    CHECKOUT_SESSIONS_TOTAL.labels(mode=mode, outcome=outcome).inc()


def record_payment_confirmed(order: Order, mode: str) -> None:
    PAYMENTS_CONFIRMED_TOTAL.labels(restaurant_id=str(order.restaurant_id), mode=mode).inc()


def record_cart_mutation(action: str) -> None:
    CART_MUTATIONS_TOTAL.labels(action=action).inc()
