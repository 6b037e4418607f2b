from decimal import Decimal
from types import SimpleNamespace

import pytest
from store.checkout.pricing import (
    format_weight,
    from_minor_units,
    payment_status_for,
    quote,
    round_cents,
    stock_shortages,
    to_minor_units,
)


def _line(name, price, quantity, stock=100, weight_kg=0.5):
    product = SimpleNamespace(
        id=f"id-{name}",
        name=name,
        price=price,
        weight_kg=weight_kg,
        stock_quantity=stock,
        has_stock_for=lambda q, s=stock: s >= q,
    )
    return {"item": SimpleNamespace(quantity=quantity), "product": product}


@pytest.fixture
def lines():
    return [_line("Kenyan Tea", 10.00, 2), _line("Plantain Chips", 5.50, 1)]


class TestQuote:
    def test_half_payment(self, lines):
        result = quote(lines, "half")

        assert result.total_amount == Decimal("25.50")
        assert result.paid_amount == Decimal("12.75")
        assert [(li.unit_amount, li.quantity) for li in result.line_items] == [(500, 2), (275, 1)]

    def test_full_payment(self, lines):
        result = quote(lines, "full")

        assert result.total_amount == Decimal("25.50")
        assert result.paid_amount == Decimal("25.50")
        assert [li.unit_amount for li in result.line_items] == [1000, 550]

    def test_half_of_odd_cents_rounds_up(self):
        result = quote([_line("Maize Flour", 0.05, 1)], "half")

        assert result.paid_amount == Decimal("0.03")
        assert result.line_items[0].unit_amount == 3

    def test_paid_amount_matches_gateway_charge_for_odd_cents(self):
        result = quote([_line("Mango Juice", 5.55, 2)], "half")

        charged = sum(li.unit_amount * li.quantity for li in result.line_items)
        assert charged == 556
        assert result.paid_amount * 100 == charged
        assert result.paid_amount == Decimal("5.56")
        assert result.total_amount == Decimal("11.10")

    def test_float_prices_sum_exactly(self):
        result = quote([_line("A", 0.1, 1), _line("B", 0.2, 1)], "full")
        assert result.total_amount == Decimal("0.30")

    def test_line_items_describe_weight(self, lines):
        result = quote(lines, "full")
        assert result.line_items[0].description == "0.5 kg"
        assert result.line_items[0].name == "Kenyan Tea"

    def test_unknown_option_is_rejected(self, lines):
        with pytest.raises(ValueError):
            quote(lines, "quarter")


class TestHelpers:
    @pytest.mark.parametrize(
        "amount,expected",
        [("12.745", "12.75"), ("12.744", "12.74"), ("0.005", "0.01")],
        ids=["half-up", "down", "tiny"],
    )
    def test_round_cents(self, amount, expected):
        assert round_cents(Decimal(amount)) == Decimal(expected)

    def test_to_minor_units(self):
        assert to_minor_units(Decimal("12.75")) == 1275
        assert to_minor_units(Decimal("2.755")) == 276

    def test_from_minor_units(self):
        assert from_minor_units(1275) == Decimal("12.75")
        assert from_minor_units(3) == Decimal("0.03")

    @pytest.mark.parametrize("weight,expected", [(2, "2 kg"), (1.25, "1.25 kg"), (None, "0 kg")], ids=["int", "fraction", "missing"])
    def test_format_weight(self, weight, expected):
        assert format_weight(weight) == expected

    def test_payment_status(self):
        assert payment_status_for("half") == "partial"
        assert payment_status_for("full") == "full"


class TestStockShortages:
    def test_no_shortage(self, lines):
        assert stock_shortages(lines) == []

    def test_reports_short_lines(self):
        shortages = stock_shortages([_line("Kenyan Tea", 10.0, 5, stock=3), _line("Chips", 1.0, 1, stock=10)])

        assert shortages == [
            {"product_id": "id-Kenyan Tea", "product_name": "Kenyan Tea", "requested": 5, "available": 3}
        ]
