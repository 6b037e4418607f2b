"""Configurable fake payment gateway for development and testing.

Sessions are kept in memory and start out unpaid. Tests (or a developer
driving the API by hand) mark a session paid with ``complete_session``,
which stands in for the shopper finishing the hosted checkout page.
"""

from uuid import uuid4

from store.gateway.port import CheckoutSession, GatewayError, LineItem, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []
        self.sessions: dict[str, CheckoutSession] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_checkout_session(
        self,
        line_items: list[LineItem],
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
        currency: str = "usd",
    ) -> CheckoutSession:
        self.calls.append(
            {
                "method": "create_checkout_session",
                "line_items": list(line_items),
                "metadata": dict(metadata),
                "success_url": success_url,
                "cancel_url": cancel_url,
                "customer_email": customer_email,
                "currency": currency,
            }
        )
        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        session_id = f"cs_test_{uuid4().hex}"
        session = CheckoutSession(
            id=session_id,
            url=f"https://checkout.fake/pay/{session_id}",
            payment_status="unpaid",
            metadata=dict(metadata),
            amount_total=sum(item.unit_amount * item.quantity for item in line_items),
            customer_email=customer_email,
        )
        self.sessions[session_id] = session
        return session

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        self.calls.append({"method": "retrieve_checkout_session", "session_id": session_id})
        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        session = self.sessions.get(session_id)
        if session is None:
            raise GatewayError(f"No such checkout session: {session_id}")
        return session

    def complete_session(self, session_id: str, payment_status: str = "paid") -> CheckoutSession:
        """Simulate the shopper paying on the hosted checkout page."""
        session = self.sessions[session_id]
        completed = CheckoutSession(
            id=session.id,
            url=session.url,
            payment_status=payment_status,
            metadata=session.metadata,
            amount_total=session.amount_total,
            customer_email=session.customer_email,
        )
        self.sessions[session_id] = completed
        return completed
