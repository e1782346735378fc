from __future__ import annotations

import json
from datetime import datetime, timezone

from qrdine.application.mappers.event_envelope import serialize_order_event
from qrdine.infrastructure.messaging import redis_events


class FakeRedis:
    def __init__(self) -> None:
        self.published: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> int:
        self.published.append((channel, message))
        return 1

    def ping(self) -> bool:
        raise ConnectionError("redis down")


def test_publisher_sends_to_restaurant_channel(monkeypatch) -> None:
    fake = FakeRedis()
    monkeypatch.setattr(redis_events, "get_redis_client", lambda timeout_seconds=1.0: fake)

    redis_events.RedisEventPublisher().publish("events:rst_001", '{"event_type":"order.placed"}')

    assert fake.published == [("events:rst_001", '{"event_type":"order.placed"}')]


def test_ping_redis_reports_failure(monkeypatch) -> None:
    monkeypatch.setattr(redis_events, "get_redis_client", lambda timeout_seconds=1.0: FakeRedis())

    assert redis_events.ping_redis() is False


def test_order_event_envelope(order_factory) -> None:
    order = order_factory()
    occurred_at = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    envelope = json.loads(
        serialize_order_event(
            event_type="order.placed",
            occurred_at=occurred_at,
            order=order,
            trace_id="abc",
            request_id="req-1",
        )
    )

    assert envelope["event_type"] == "order.placed"
    assert envelope["restaurant_id"] == "rst_001"
    assert envelope["trace_id"] == "abc"
    assert envelope["payload"]["totalMoney"] == {"amountCents": 1798, "currency": "GBP"}
    assert envelope["payload"]["items"][0]["quantity"] == 2
