"""Shopping Cart aggregate — one per customer, keyed by product.

The cart holds product references and quantities only. Prices are always
read live from the catalogue, so a cart never goes stale; it is priced at
checkout and emptied when a paid order is recorded.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from store.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from store.domain import store


@store.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@store.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def add_item(self, product_id, quantity=1):
        """Add a product, or increase its quantity if it is already in the cart."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        existing = self.line_for(product_id)
        if existing:
            existing.quantity += quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now))
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                quantity=quantity,
            )
        )

    def update_quantity(self, product_id, new_quantity):
        if new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self.line_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        item = self.line_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self, order_id=None):
        count = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                items_removed=count,
                order_id=str(order_id) if order_id else None,
            )
        )


@store.repository(part_of=ShoppingCart)
class CartRepository:
    def for_customer(self, customer_id):
        """The customer's cart, or None if they never added anything."""
        results = self._dao.query.filter(customer_id=str(customer_id)).all()
        return results.first if results.items else None

    def get_or_create(self, customer_id):
        return self.for_customer(customer_id) or ShoppingCart.create(customer_id)
