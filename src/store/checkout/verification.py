"""Payment verification — turn a paid checkout session into an order.

Runs as a single command, so the order, its items, every stock decrement
and the emptied cart are committed together by one unit of work. All
products are checked for stock before any of them is touched; a shortage
aborts the whole command with nothing written.

Verifying the same session twice returns the order created the first time.
The order records the amount the gateway collected for the session.
"""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from store.cart.cart import ShoppingCart
from store.cart.items import priced_lines
from store.checkout.errors import CheckoutFailedError, EmptyCartError, InsufficientStockError, PaymentIncompleteError
from store.checkout.pricing import from_minor_units, payment_status_for, round_cents, stock_shortages, to_decimal
from store.domain import logger, store
from store.gateway import get_gateway
from store.gateway.port import GatewayError
from store.order.order import DeliveryAddress, Order
from store.product.product import Product


# Keys every session opened by InitiateCheckout carries
REQUIRED_METADATA = ("user_id", "payment_option", "total_amount", "paid_amount")


@store.command(part_of="Order")
class VerifyPayment:
    session_id = String(required=True, max_length=255)


def _result(order):
    return {"order_id": str(order.id), "order_number": order.order_number}


def _charged_amount(session):
    """What the gateway actually collected, falling back to the amount quoted at initiation."""
    if session.amount_total is not None:
        return from_minor_units(session.amount_total)
    return round_cents(to_decimal(session.metadata["paid_amount"]))


def _delivery_address(metadata):
    return DeliveryAddress(
        street_address=metadata.get("street_address"),
        apartment_suite=metadata.get("apartment_suite") or None,
        city=metadata.get("city"),
        state=metadata.get("state"),
        zip_code=metadata.get("zip_code"),
        delivery_notes=metadata.get("delivery_notes") or None,
    )


@store.command_handler(part_of=Order)
class VerifyPaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command):
        try:
            session = get_gateway().retrieve_checkout_session(command.session_id)
        except GatewayError as exc:
            logger.error("Checkout session lookup failed", session_id=command.session_id, error=str(exc))
            raise CheckoutFailedError(str(exc)) from exc

        if not session.is_paid:
            raise PaymentIncompleteError(command.session_id, session.payment_status)

        orders = current_domain.repository_for(Order)
        existing = orders.for_checkout_session(session.id)
        if existing is not None:
            logger.info("Session already verified", session_id=session.id, order_id=str(existing.id))
            return _result(existing)

        metadata = session.metadata or {}
        missing = [key for key in REQUIRED_METADATA if not metadata.get(key)]
        if missing:
            logger.error("Paid session has no store metadata", session_id=session.id, missing=missing)
            raise CheckoutFailedError("Session was not created by this store")
        customer_id = metadata["user_id"]
        paid_amount = _charged_amount(session)

        carts = current_domain.repository_for(ShoppingCart)
        cart = carts.for_customer(customer_id)
        lines = priced_lines(cart)
        if not lines:
            raise EmptyCartError()

        shortages = stock_shortages(lines)
        if shortages:
            logger.error(
                "Paid session left without an order: stock ran out before verification",
                session_id=session.id,
                customer_id=customer_id,
                paid_amount=str(paid_amount),
                shortages=shortages,
            )
            raise InsufficientStockError(shortages)

        order = Order.place(
            customer_id=customer_id,
            checkout_session_id=session.id,
            payment_status=payment_status_for(metadata["payment_option"]),
            total_amount=float(round_cents(to_decimal(metadata["total_amount"]))),
            paid_amount=float(paid_amount),
            delivery_address=_delivery_address(metadata),
            lines=[
                {
                    "product_id": str(line["product"].id),
                    "product_name": line["product"].name,
                    "quantity": line["item"].quantity,
                    "price": line["product"].price,
                    "weight_kg": line["product"].weight_kg or 0.0,
                }
                for line in lines
            ],
        )

        for line in lines:
            line["product"].decrement_stock(line["item"].quantity, order_id=order.id)
        cart.clear(order_id=order.id)

        products = current_domain.repository_for(Product)
        orders.add(order)
        for line in lines:
            products.add(line["product"])
        carts.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            session_id=session.id,
            customer_id=customer_id,
            total_amount=order.total_amount,
            paid_amount=order.paid_amount,
        )
        return _result(order)
