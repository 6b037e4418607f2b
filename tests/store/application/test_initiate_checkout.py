import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from store.checkout.errors import CheckoutFailedError, EmptyCartError, InsufficientStockError
from store.checkout.initiation import METADATA_VALUE_LIMIT, InitiateCheckout
from store.order.order import Order
from store.product.product import Product


@pytest.fixture
def checkout(delivery):
    def _checkout(customer_id="customer-001", payment_option="half", **overrides):
        fields = dict(
            customer_id=customer_id,
            customer_email="amina@example.com",
            payment_option=payment_option,
            success_url="http://localhost:8000/payment-success?session_id={CHECKOUT_SESSION_ID}",
            cancel_url="http://localhost:8000/checkout",
            **delivery,
        )
        fields.update(overrides)
        return current_domain.process(InitiateCheckout(**fields), asynchronous=False)

    return _checkout


class TestInitiateCheckout:
    def test_half_payment_session(self, add_product, fill_cart, gateway, checkout):
        tea = add_product(name="Kenyan Tea", price=10.00, weight_kg=0.5)
        chips = add_product(name="Plantain Chips", price=5.50, category="snacks", weight_kg=0.2)
        fill_cart("customer-001", (tea, 2), (chips, 1))

        result = checkout(payment_option="half")

        assert result["session_id"].startswith("cs_test_")
        assert result["url"].endswith(result["session_id"])

        call = gateway.calls[0]
        assert sorted((li.unit_amount, li.quantity) for li in call["line_items"]) == [(275, 1), (500, 2)]
        assert call["metadata"]["total_amount"] == "25.50"
        assert call["metadata"]["paid_amount"] == "12.75"
        assert call["metadata"]["payment_option"] == "half"
        assert call["metadata"]["user_id"] == "customer-001"
        assert call["customer_email"] == "amina@example.com"

    def test_full_payment_session(self, add_product, fill_cart, gateway, checkout):
        tea = add_product(price=10.00)
        fill_cart("customer-001", (tea, 2))

        checkout(payment_option="full")

        metadata = gateway.calls[0]["metadata"]
        assert metadata["total_amount"] == metadata["paid_amount"] == "20.00"

    def test_delivery_address_travels_as_metadata(self, add_product, fill_cart, gateway, checkout, delivery):
        fill_cart("customer-001", (add_product(), 1))

        checkout()

        metadata = gateway.calls[0]["metadata"]
        for key, value in delivery.items():
            assert metadata[key] == value
        assert all(isinstance(value, str) for value in metadata.values())

    def test_delivery_notes_up_to_the_limit_are_kept_whole(self, add_product, fill_cart, gateway, checkout):
        fill_cart("customer-001", (add_product(), 1))
        notes = "x" * METADATA_VALUE_LIMIT

        checkout(delivery_notes=notes)

        assert gateway.calls[0]["metadata"]["delivery_notes"] == notes

    def test_delivery_notes_over_the_limit_are_rejected(self, add_product, fill_cart, gateway, checkout):
        fill_cart("customer-001", (add_product(), 1))

        with pytest.raises(ValidationError) as exc:
            checkout(delivery_notes="x" * (METADATA_VALUE_LIMIT + 1))

        assert "delivery_notes" in exc.value.messages
        assert gateway.calls == []

    def test_empty_cart_never_calls_gateway(self, gateway, checkout):
        with pytest.raises(EmptyCartError) as exc:
            checkout()

        assert exc.value.code == "EMPTY_CART"
        assert gateway.calls == []

    def test_insufficient_stock_never_calls_gateway(self, add_product, fill_cart, gateway, checkout):
        tea = add_product(stock_quantity=1)
        fill_cart("customer-001", (tea, 3))

        with pytest.raises(InsufficientStockError) as exc:
            checkout()

        assert exc.value.code == "INSUFFICIENT_STOCK"
        assert exc.value.shortages[0]["available"] == 1
        assert gateway.calls == []

    def test_gateway_failure(self, add_product, fill_cart, gateway, checkout):
        fill_cart("customer-001", (add_product(), 1))
        gateway.configure(should_succeed=False, failure_reason="Card network down")

        with pytest.raises(CheckoutFailedError) as exc:
            checkout()

        assert exc.value.code == "CHECKOUT_FAILED"
        assert exc.value.message == "Card network down"

    def test_nothing_is_written(self, add_product, fill_cart, gateway, checkout):
        tea = add_product(stock_quantity=20)
        fill_cart("customer-001", (tea, 2))

        checkout()

        assert current_domain.repository_for(Order).count() == 0
        assert current_domain.repository_for(Product).get(tea.id).stock_quantity == 20
