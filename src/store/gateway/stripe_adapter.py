"""Stripe payment gateway adapter.

Uses Stripe Checkout: one ``checkout.Session`` per purchase, card payments
only, paid in full on Stripe's hosted page.
"""

import stripe
import structlog

from store.gateway.port import CheckoutSession, GatewayError, LineItem, PaymentGateway

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    @staticmethod
    def _to_session(session) -> CheckoutSession:
        return CheckoutSession(
            id=session["id"],
            url=session.get("url"),
            payment_status=session.get("payment_status") or "unpaid",
            metadata=dict(session.get("metadata") or {}),
            amount_total=session.get("amount_total"),
            customer_email=session.get("customer_email"),
        )

    def create_checkout_session(
        self,
        line_items: list[LineItem],
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
        customer_email: str | None = None,
        currency: str = "usd",
    ) -> CheckoutSession:
        stripe_line_items = []
        for item in line_items:
            product_data = {"name": item.name}
            if item.description:
                product_data["description"] = item.description
            stripe_line_items.append(
                {
                    "price_data": {
                        "currency": currency,
                        "product_data": product_data,
                        "unit_amount": item.unit_amount,
                    },
                    "quantity": item.quantity,
                }
            )

        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                payment_method_types=["card"],
                mode="payment",
                line_items=stripe_line_items,
                success_url=success_url,
                cancel_url=cancel_url,
                customer_email=customer_email,
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            logger.error("Stripe checkout session creation failed", error=str(exc))
            raise GatewayError(exc.user_message or str(exc)) from exc

        return self._to_session(session)

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.error("Stripe checkout session lookup failed", session_id=session_id, error=str(exc))
            raise GatewayError(exc.user_message or str(exc)) from exc

        return self._to_session(session)
