import pytest
from protean.exceptions import ValidationError
from store.cart.cart import ShoppingCart
from store.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated


@pytest.fixture
def cart():
    return ShoppingCart.create("customer-001")


class TestAddItem:
    def test_new_cart_is_empty(self, cart):
        assert cart.is_empty

    def test_add_item(self, cart):
        cart.add_item("product-1", 2)

        assert len(cart.items) == 1
        assert cart.line_for("product-1").quantity == 2
        assert isinstance(cart._events[-1], CartItemAdded)

    def test_adding_same_product_increments_quantity(self, cart):
        cart.add_item("product-1", 2)
        cart.add_item("product-1", 3)

        assert len(cart.items) == 1
        assert cart.line_for("product-1").quantity == 5

    def test_quantity_must_be_positive(self, cart):
        with pytest.raises(ValidationError):
            cart.add_item("product-1", 0)


class TestUpdateQuantity:
    def test_update_quantity(self, cart):
        cart.add_item("product-1", 2)
        cart.update_quantity("product-1", 7)

        assert cart.line_for("product-1").quantity == 7
        event = cart._events[-1]
        assert isinstance(event, CartQuantityUpdated)
        assert event.previous_quantity == 2

    def test_quantity_below_one_is_rejected(self, cart):
        cart.add_item("product-1", 2)

        with pytest.raises(ValidationError):
            cart.update_quantity("product-1", 0)
        assert cart.line_for("product-1").quantity == 2

    def test_unknown_product_is_rejected(self, cart):
        with pytest.raises(ValidationError):
            cart.update_quantity("product-9", 1)


class TestRemoveAndClear:
    def test_remove_item(self, cart):
        cart.add_item("product-1", 1)
        cart.add_item("product-2", 1)
        cart.remove_item("product-1")

        assert cart.line_for("product-1") is None
        assert len(cart.items) == 1
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_clear(self, cart):
        cart.add_item("product-1", 1)
        cart.add_item("product-2", 4)
        cart.clear(order_id="order-1")

        assert cart.is_empty
        event = cart._events[-1]
        assert isinstance(event, CartCleared)
        assert event.items_removed == 2
        assert event.order_id == "order-1"
