from __future__ import annotations

import logging
from typing import Any

import stripe

from qrdine.application.ports.payments import (
    CheckoutGateway,
    CheckoutSession,
    CheckoutSessionRequest,
    InvalidWebhookError,
    PaymentEvent,
    PaymentProviderError,
    SESSION_COMPLETE,
    SESSION_EXPIRED,
    SESSION_OPEN,
)

logger = logging.getLogger(__name__)

_STRIPE_CONFIGURED = False


def configure_stripe(timeout_seconds: float) -> None:
    global _STRIPE_CONFIGURED
    if _STRIPE_CONFIGURED:
        return

    stripe.max_network_retries = 0
    stripe.default_http_client = stripe.new_default_http_client(timeout=timeout_seconds)
    _STRIPE_CONFIGURED = True


class StripeCheckoutGateway(CheckoutGateway):
    """Stripe Checkout in payment mode, one line item per order item."""

    is_mock = False

    def __init__(self, secret_key: str, webhook_secret: str | None = None) -> None:
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret

    def create_session(self, request: CheckoutSessionRequest) -> CheckoutSession:
        line_items = [
            {
                "price_data": {
                    "currency": item.currency.lower(),
                    "product_data": _product_data(item.name, item.description, item.image),
                    "unit_amount": item.unit_amount_cents,
                },
                "quantity": item.quantity,
            }
            for item in request.line_items
        ]
        try:
            session = stripe.checkout.Session.create(
                api_key=self._secret_key,
                line_items=line_items,
                mode="payment",
                success_url=request.success_url,
                cancel_url=request.cancel_url,
                metadata=request.metadata,
            )
        except stripe.StripeError as exc:
            logger.error(
                "stripe_checkout_create_failed",
                extra={"order_id": request.order_id, "error": str(exc)},
            )
            raise PaymentProviderError(f"checkout session could not be created: {exc}") from exc

        return CheckoutSession(session_id=session.id, url=session.url)

    def get_session(self, session_id: str) -> CheckoutSession | None:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self._secret_key)
        except stripe.StripeError as exc:
            raise PaymentProviderError(f"checkout session lookup failed: {exc}") from exc

        return CheckoutSession(
            session_id=session.id,
            url=session.url,
            status=_session_status(session),
        )

    def expire_session(self, session_id: str) -> None:
        try:
            stripe.checkout.Session.expire(session_id, api_key=self._secret_key)
        except stripe.StripeError as exc:
            raise PaymentProviderError(f"checkout session expiry failed: {exc}") from exc

    def parse_event(self, payload: bytes, signature: str | None) -> PaymentEvent:
        if not self._webhook_secret:
            raise InvalidWebhookError("STRIPE_WEBHOOK_SECRET is not set")
        if not signature:
            raise InvalidWebhookError("missing Stripe-Signature header")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except ValueError as exc:
            raise InvalidWebhookError("webhook payload is not valid JSON") from exc
        except stripe.SignatureVerificationError as exc:
            raise InvalidWebhookError("webhook signature verification failed") from exc

        session: Any = event["data"]["object"]
        metadata = session.get("metadata") or {}
        return PaymentEvent(
            event_type=event["type"],
            session_id=session["id"],
            order_id=metadata.get("orderId"),
        )


def _product_data(name: str, description: str | None, image: str | None) -> dict[str, Any]:
    product: dict[str, Any] = {"name": name}
    if description:
        product["description"] = description
    if image:
        product["images"] = [image]
    return product


def _session_status(session: Any) -> str:
    if session.status == "complete" or getattr(session, "payment_status", None) == "paid":
        return SESSION_COMPLETE
    if session.status == "open":
        return SESSION_OPEN
    return SESSION_EXPIRED
