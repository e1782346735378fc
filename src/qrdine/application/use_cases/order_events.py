from __future__ import annotations

import logging
from datetime import datetime, timezone

from qrdine.application.mappers.event_envelope import restaurant_channel, serialize_order_event
from qrdine.application.ports.publisher import EventPublisher
from qrdine.application.use_cases.context import TraceContext
from qrdine.domain.order.entities import Order

logger = logging.getLogger(__name__)


def publish_order_event(
    publisher: EventPublisher,
    event_type: str,
    order: Order,
    trace_ctx: TraceContext,
    occurred_at: datetime | None = None,
) -> None:
    message = serialize_order_event(
        event_type=event_type,
        occurred_at=occurred_at or datetime.now(timezone.utc),
        order=order,
        trace_id=trace_ctx.trace_id,
        request_id=trace_ctx.request_id,
    )
    try:
        publisher.publish(channel=restaurant_channel(str(order.restaurant_id)), message=message)
    except Exception:
        # Kitchen notifications are best effort; the order is already committed.
        logger.warning(
            "order_event_publish_failed",
            extra={"event_type": event_type, "order_id": str(order.order_id)},
            exc_info=True,
        )
