"""Checkout initiation — price the cart and open a hosted payment session.

Nothing is written locally. The delivery address and the amounts travel
to the gateway as session metadata and come back at verification.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from store.cart.cart import ShoppingCart
from store.cart.items import priced_lines
from store.checkout.errors import CheckoutFailedError, EmptyCartError, InsufficientStockError
from store.checkout.pricing import PaymentOption, quote, stock_shortages
from store.domain import logger, store
from store.gateway import checkout_currency, get_gateway
from store.gateway.port import GatewayError

# Gateways cap metadata values at 500 characters
METADATA_VALUE_LIMIT = 500


@store.command(part_of="ShoppingCart")
class InitiateCheckout:
    customer_id = Identifier(required=True)
    customer_email = String(max_length=254)
    payment_option = String(choices=PaymentOption, required=True)
    street_address = String(required=True, max_length=255)
    apartment_suite = String(max_length=100)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    delivery_notes = String(max_length=METADATA_VALUE_LIMIT)
    success_url = String(required=True, max_length=1000)
    cancel_url = String(required=True, max_length=1000)


def session_metadata(command, checkout_quote) -> dict[str, str]:
    return {
        "user_id": str(command.customer_id),
        "payment_option": command.payment_option,
        "total_amount": str(checkout_quote.total_amount),
        "paid_amount": str(checkout_quote.paid_amount),
        "street_address": command.street_address,
        "apartment_suite": command.apartment_suite or "",
        "city": command.city,
        "state": command.state,
        "zip_code": command.zip_code,
        "delivery_notes": command.delivery_notes or "",
    }


@store.command_handler(part_of=ShoppingCart)
class InitiateCheckoutHandler:
    @handle(InitiateCheckout)
    def initiate_checkout(self, command):
        cart = current_domain.repository_for(ShoppingCart).for_customer(command.customer_id)
        lines = priced_lines(cart)
        if not lines:
            raise EmptyCartError()

        shortages = stock_shortages(lines)
        if shortages:
            raise InsufficientStockError(shortages)

        checkout_quote = quote(lines, command.payment_option)

        try:
            session = get_gateway().create_checkout_session(
                line_items=checkout_quote.line_items,
                metadata=session_metadata(command, checkout_quote),
                success_url=command.success_url,
                cancel_url=command.cancel_url,
                customer_email=command.customer_email,
                currency=checkout_currency(),
            )
        except GatewayError as exc:
            logger.error("Checkout session creation failed", customer_id=str(command.customer_id), error=str(exc))
            raise CheckoutFailedError(str(exc)) from exc

        logger.info(
            "Checkout session created",
            customer_id=str(command.customer_id),
            session_id=session.id,
            payment_option=command.payment_option,
            total_amount=str(checkout_quote.total_amount),
            paid_amount=str(checkout_quote.paid_amount),
        )
        return {"session_id": session.id, "url": session.url}
