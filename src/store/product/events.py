"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from store.domain import store


@store.event(part_of="Product")
class ProductAdded:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    category = String(required=True)
    price = Float(required=True)
    stock_quantity = Integer(required=True)
    added_at = DateTime(required=True)


@store.event(part_of="Product")
class ProductDetailsUpdated:
    """An admin edited a product's details, price or stock level."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    previous_stock = Integer(required=True)
    stock_quantity = Integer(required=True)
    updated_at = DateTime(required=True)


@store.event(part_of="Product")
class StockAdjusted:
    """Stock was decremented because a paid order consumed it."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    previous_stock = Integer(required=True)
    stock_quantity = Integer(required=True)
    quantity_removed = Integer(required=True)
    order_id = Identifier()
    adjusted_at = DateTime(required=True)


@store.event(part_of="Product")
class ProductImageUploaded:
    """A new product image was stored and linked."""

    __version__ = 1

    product_id = Identifier(required=True)
    image_url = String(required=True)



@store.event(part_of="ProductComment")
class CommentPosted:
    """A signed-in shopper commented on a product."""

    __version__ = 1

    comment_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    posted_at = DateTime(required=True)
