from __future__ import annotations

import pytest

from qrdine.application.ports.payments import InvalidWebhookError, PaymentEvent
from qrdine.application.use_cases.confirm_payment import (
    SESSION_COMPLETED,
    SESSION_EXPIRED,
    ConfirmPayment,
)
from qrdine.application.use_cases.context import TraceContext
from qrdine.domain.common.ids import OrderId
from qrdine.domain.order.entities import OrderStatus
from qrdine.infrastructure.payments.mock_gateway import MockCheckoutGateway

TRACE = TraceContext(trace_id=None, request_id=None)


def _confirm(order_repository, gateway, publisher, signature: str | None = "valid"):
    return ConfirmPayment(
        order_repository=order_repository,
        gateway=gateway,
        publisher=publisher,
    ).execute(payload=b"{}", signature=signature, trace_ctx=TRACE)


def test_completed_session_marks_order_paid(
    order_repository, gateway, publisher, pending_order
) -> None:
    order_repository.add(pending_order.start_checkout("cs_test_1"))
    gateway.next_event = PaymentEvent(SESSION_COMPLETED, "cs_test_1", "ord_001")

    ack = _confirm(order_repository, gateway, publisher)

    assert ack.received is True
    stored = order_repository.get(OrderId("ord_001"))
    assert stored.status == OrderStatus.PAID
    assert stored.payment_reference == "cs_test_1"
    assert publisher.messages[0][0] == "events:rst_001"


def test_duplicate_completion_is_acknowledged(
    order_repository, gateway, publisher, pending_order
) -> None:
    order_repository.add(pending_order.mark_paid("cs_test_1"))
    gateway.next_event = PaymentEvent(SESSION_COMPLETED, "cs_test_1", "ord_001")

    assert _confirm(order_repository, gateway, publisher).received is True
    assert order_repository.update_calls == []


def test_expired_session_releases_reference(
    order_repository, gateway, publisher, pending_order
) -> None:
    order_repository.add(pending_order.start_checkout("cs_test_1"))
    gateway.next_event = PaymentEvent(SESSION_EXPIRED, "cs_test_1", "ord_001")

    _confirm(order_repository, gateway, publisher)

    stored = order_repository.get(OrderId("ord_001"))
    assert stored.payment_reference is None
    assert stored.status == OrderStatus.PENDING


def test_expiry_of_superseded_session_is_ignored(
    order_repository, gateway, publisher, pending_order
) -> None:
    order_repository.add(pending_order.start_checkout("cs_test_2"))
    gateway.next_event = PaymentEvent(SESSION_EXPIRED, "cs_test_1", "ord_001")

    _confirm(order_repository, gateway, publisher)

    assert order_repository.get(OrderId("ord_001")).payment_reference == "cs_test_2"


def test_unrelated_events_and_unknown_orders_are_acknowledged(
    order_repository, gateway, publisher
) -> None:
    gateway.next_event = PaymentEvent("payment_intent.created", "pi_1", None)
    assert _confirm(order_repository, gateway, publisher).received is True

    gateway.next_event = PaymentEvent(SESSION_COMPLETED, "cs_test_1", "ord_404")
    assert _confirm(order_repository, gateway, publisher).received is True
    assert order_repository.update_calls == []


def test_bad_signature_is_rejected(order_repository, gateway, publisher) -> None:
    gateway.next_event = PaymentEvent(SESSION_COMPLETED, "cs_test_1", "ord_001")

    with pytest.raises(InvalidWebhookError):
        _confirm(order_repository, gateway, publisher, signature="forged")


def test_webhook_without_provider_is_rejected(order_repository, publisher) -> None:
    with pytest.raises(InvalidWebhookError):
        _confirm(order_repository, MockCheckoutGateway(), publisher)


def test_completion_of_earlier_session_expires_the_replacement(
    order_repository, gateway, publisher, pending_order
) -> None:
    order_repository.add(pending_order.start_checkout("cs_test_2"))
    gateway.next_event = PaymentEvent(SESSION_COMPLETED, "cs_test_1", "ord_001")

    _confirm(order_repository, gateway, publisher)

    stored = order_repository.get(OrderId("ord_001"))
    assert stored.status == OrderStatus.PAID
    assert stored.payment_reference == "cs_test_1"
    assert gateway.expired == ["cs_test_2"]


def test_second_payment_for_paid_order_is_logged(
    order_repository, gateway, publisher, pending_order, caplog
) -> None:
    order_repository.add(pending_order.mark_paid("cs_test_1"))
    gateway.next_event = PaymentEvent(SESSION_COMPLETED, "cs_test_2", "ord_001")

    with caplog.at_level("ERROR"):
        assert _confirm(order_repository, gateway, publisher).received is True

    assert order_repository.update_calls == []
    assert [record.getMessage() for record in caplog.records] == ["payment_duplicate"]
