from __future__ import annotations

from qrdine.application.ports.payments import (
    CheckoutGateway,
    CheckoutSession,
    CheckoutSessionRequest,
    InvalidWebhookError,
    PaymentEvent,
)


def mock_payment_reference(order_id: str) -> str:
    return f"mock_{order_id}"


class MockCheckoutGateway(CheckoutGateway):
    """Settles orders without a payment provider.

    Used when no provider credential is configured so the ordering flow can be
    exercised end to end; the diner is sent straight to the success URL.
    """

    is_mock = True

    def create_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        return CheckoutSession(
            session_id=mock_payment_reference(request.order_id),
            url=request.success_url,
            is_mock=True,
        )

    def get_session(self, session_id: str) -> CheckoutSession | None:
        return None

    def expire_session(self, session_id: str) -> None:
        return None

    def parse_event(self, payload: bytes, signature: str | None) -> PaymentEvent:
        raise InvalidWebhookError("no payment provider is configured")
