"""Cart item management — commands and handler.

Carts are addressed by customer rather than by cart id; the first add
creates the cart.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from store.cart.cart import ShoppingCart
from store.domain import store
from store.product.product import Product


@store.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@store.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@store.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@store.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        # Raises ObjectNotFoundError for unknown products
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_create(command.customer_id)
        cart.add_item(product_id=command.product_id, quantity=command.quantity or 1)
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = self._existing_cart(repo, command.customer_id)
        cart.update_quantity(product_id=command.product_id, new_quantity=command.new_quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = self._existing_cart(repo, command.customer_id)
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)

    @staticmethod
    def _existing_cart(repo, customer_id):
        cart = repo.for_customer(customer_id)
        if cart is None:
            raise ValidationError({"cart": ["Cart is empty"]})
        return cart


def priced_lines(cart):
    """Cart lines joined with live product data, skipping products that no longer exist."""
    if cart is None:
        return []

    products = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        try:
            product = products.get(item.product_id)
        except ObjectNotFoundError:
            continue
        lines.append({"item": item, "product": product})
    return lines
