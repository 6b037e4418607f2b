"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- StripeGateway when STRIPE_SECRET_KEY is configured
"""

import os

from store.gateway.fake_adapter import FakeGateway
from store.gateway.port import PaymentGateway
from store.gateway.stripe_adapter import StripeGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        secret_key = os.environ.get("STRIPE_SECRET_KEY")
        _current_gateway = StripeGateway(secret_key) if secret_key else FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None


def checkout_currency() -> str:
    return os.environ.get("STRIPE_CURRENCY", "usd").lower()
