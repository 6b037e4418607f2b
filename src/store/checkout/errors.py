"""Checkout business-rule failures.

Each failure carries a stable ``code`` the storefront switches on, and the
HTTP status the API answers with.
"""


class CheckoutError(Exception):
    code = "CHECKOUT_ERROR"
    status_code = 400

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        return {"code": self.code, "message": self.message, **self.details}


class EmptyCartError(CheckoutError):
    code = "EMPTY_CART"
    status_code = 400

    def __init__(self, message="Your cart is empty"):
        super().__init__(message)


class InsufficientStockError(CheckoutError):
    code = "INSUFFICIENT_STOCK"
    status_code = 409

    def __init__(self, shortages):
        names = ", ".join(s["product_name"] for s in shortages)
        super().__init__(f"Not enough stock for: {names}", shortages=shortages)
        self.shortages = shortages


class PaymentIncompleteError(CheckoutError):
    code = "PAYMENT_INCOMPLETE"
    status_code = 402

    def __init__(self, session_id, payment_status):
        super().__init__("Payment not completed", session_id=session_id, payment_status=payment_status)


class CheckoutFailedError(CheckoutError):
    """The payment gateway failed; the message is the gateway's own."""

    code = "CHECKOUT_FAILED"
    status_code = 502
