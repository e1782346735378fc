from __future__ import annotations

import logging
import os

from qrdine.application.ports.payments import CheckoutGateway
from qrdine.infrastructure.payments.mock_gateway import MockCheckoutGateway
from qrdine.infrastructure.payments.stripe_gateway import StripeCheckoutGateway, configure_stripe

logger = logging.getLogger(__name__)


def _timeout_seconds() -> float:
    raw_value = os.getenv("STRIPE_TIMEOUT_SECONDS", "10")
    try:
        return max(1.0, float(raw_value))
    except ValueError:
        return 10.0


def build_checkout_gateway(secret_key: str | None = None) -> CheckoutGateway:
    key = secret_key if secret_key is not None else os.getenv("STRIPE_SECRET_KEY", "")
    if not key.strip():
        logger.debug("stripe_not_configured_using_mock_checkout")
        return MockCheckoutGateway()

    configure_stripe(timeout_seconds=_timeout_seconds())
    return StripeCheckoutGateway(
        secret_key=key.strip(),
        webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET") or None,
    )
