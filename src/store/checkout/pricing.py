"""Money arithmetic for checkout.

Prices are stored as floats but every calculation here goes through
``Decimal``. Halves of odd cents round half-up on each gateway line, and
the paid amount is the sum of those lines, so it always equals the charge.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from store.gateway.port import LineItem
from store.order.order import PaymentStatus

CENT = Decimal("0.01")


class PaymentOption(Enum):
    HALF = "half"
    FULL = "full"


_FRACTIONS = {
    PaymentOption.HALF: Decimal("0.5"),
    PaymentOption.FULL: Decimal("1"),
}


def to_decimal(value) -> Decimal:
    return Decimal(str(value))


def round_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(amount) / 100).quantize(CENT)


def payment_status_for(payment_option) -> str:
    option = PaymentOption(payment_option)
    return PaymentStatus.PARTIAL.value if option == PaymentOption.HALF else PaymentStatus.FULL.value


def format_weight(weight_kg) -> str:
    return f"{to_decimal(weight_kg or 0).normalize():f} kg"


@dataclass(frozen=True)
class Quote:
    total_amount: Decimal
    paid_amount: Decimal
    line_items: list[LineItem]


def quote(lines, payment_option) -> Quote:
    """Price cart lines for ``payment_option``.

    Args:
        lines: Dicts with ``item`` (a CartItem) and ``product`` (its Product).
    """
    fraction = _FRACTIONS[PaymentOption(payment_option)]

    total = Decimal("0")
    line_items = []
    for line in lines:
        product, quantity = line["product"], line["item"].quantity
        price = to_decimal(product.price)
        total += price * quantity
        line_items.append(
            LineItem(
                name=product.name,
                description=format_weight(product.weight_kg),
                unit_amount=to_minor_units(price * fraction),
                quantity=quantity,
            )
        )

    # The paid amount is what the gateway will charge: the sum of the rounded line amounts
    charged = sum(item.unit_amount * item.quantity for item in line_items)
    return Quote(total_amount=round_cents(total), paid_amount=from_minor_units(charged), line_items=line_items)


def stock_shortages(lines) -> list[dict]:
    """Cart lines asking for more than the product has in stock."""
    return [
        {
            "product_id": str(line["product"].id),
            "product_name": line["product"].name,
            "requested": line["item"].quantity,
            "available": line["product"].stock_quantity or 0,
        }
        for line in lines
        if not line["product"].has_stock_for(line["item"].quantity)
    ]
