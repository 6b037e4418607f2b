"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
The storefront uses hosted checkout: it asks the gateway for a checkout
session, sends the shopper to the session URL, and later reads the session
back to learn whether it was paid.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class GatewayError(Exception):
    """The gateway rejected a request or could not be reached."""


@dataclass(frozen=True)
class LineItem:
    """One priced line on the hosted checkout page. Amounts are in minor units."""

    name: str
    unit_amount: int
    quantity: int
    description: str | None = None


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str | None = None
    payment_status: str = "unpaid"
    metadata: dict[str, str] = field(default_factory=dict)
    amount_total: int | None = None
    customer_email: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_checkout_session(
        self,
        line_items: list[LineItem],
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
        currency: str = "usd",
    ) -> CheckoutSession:
        """Open a hosted checkout session."""
        ...

    @abstractmethod
    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """Read a checkout session back, including its payment status."""
        ...
