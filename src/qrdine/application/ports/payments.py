from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class CheckoutLineItem:
    name: str
    description: str | None
    image: str | None
    unit_amount_cents: int
    currency: str
    quantity: int


@dataclass(frozen=True)
class CheckoutSessionRequest:
    order_id: str
    line_items: list[CheckoutLineItem]
    success_url: str
    cancel_url: str
    metadata: dict[str, str] = field(default_factory=dict)


SESSION_OPEN = "open"
SESSION_COMPLETE = "complete"
SESSION_EXPIRED = "expired"


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    url: str | None
    is_mock: bool = False
    status: str = SESSION_OPEN

    @property
    def is_open(self) -> bool:
        return self.status == SESSION_OPEN

    @property
    def is_complete(self) -> bool:
        return self.status == SESSION_COMPLETE


@dataclass(frozen=True)
class PaymentEvent:
    event_type: str
    session_id: str
    order_id: str | None


class CheckoutGateway(Protocol):
    """Hosted checkout provider.

    ``is_mock`` gateways settle orders without contacting any payment system;
    callers must surface that flag so a mock settlement is never mistaken for
    a real charge. ``get_session`` reports a session as ``complete`` once it
    has been paid, whether or not the webhook has arrived yet.
    """

    is_mock: bool

    def create_session(self, request: CheckoutSessionRequest) -> CheckoutSession: ...

    def get_session(self, session_id: str) -> CheckoutSession | None: ...

    def expire_session(self, session_id: str) -> None: ...

    def parse_event(self, payload: bytes, signature: str | None) -> PaymentEvent: ...


class PaymentProviderError(Exception):
    pass


class InvalidWebhookError(Exception):
    pass
