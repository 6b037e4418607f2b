"""Product aggregate — an item in the storefront catalogue.

Stock is the only part of a product that changes outside the back office:
every paid order decrements it through ``decrement_stock``. The level can
never go below zero.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text

from store.domain import store
from store.product.events import ProductAdded, ProductDetailsUpdated, ProductImageUploaded, StockAdjusted

LOW_STOCK_THRESHOLD = 10


class ProductCategory(Enum):
    BEVERAGES = "beverages"
    FRUITS_VEGETABLES = "fruits_vegetables"
    SNACKS = "snacks"
    DRY_CANNED = "dry_canned"
    BAKERY = "bakery"
    DAIRY = "dairy"
    SEAFOODS = "seafoods"
    MEATS_POULTRY = "meats_poultry"
    GROCERIES_STAPLES = "groceries_staples"


def _round_price(value):
    return round(float(value), 2) if value is not None else None


@store.aggregate
class Product:
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    weight_kg = Float(default=0.0, min_value=0.0)
    stock_quantity = Integer(default=0)
    category = String(choices=ProductCategory, required=True)
    image_url = String(max_length=1000)
    video_url = String(max_length=1000)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock_quantity is not None and self.stock_quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})

    @property
    def is_low_stock(self) -> bool:
        return (self.stock_quantity or 0) < LOW_STOCK_THRESHOLD

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def add(
        cls,
        name,
        price,
        category,
        stock_quantity=0,
        weight_kg=0.0,
        description=None,
        image_url=None,
        video_url=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            price=_round_price(price),
            weight_kg=weight_kg or 0.0,
            stock_quantity=stock_quantity or 0,
            category=category,
            image_url=image_url,
            video_url=video_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                category=product.category,
                price=product.price,
                stock_quantity=product.stock_quantity,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Back-office edits
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        """Apply an admin edit. Only the keys present in ``changes`` are touched."""
        previous_stock = self.stock_quantity

        for field_name in ("name", "description", "weight_kg", "stock_quantity", "category", "image_url", "video_url"):
            if field_name in changes and changes[field_name] is not None:
                setattr(self, field_name, changes[field_name])
        if changes.get("price") is not None:
            self.price = _round_price(changes["price"])

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                previous_stock=previous_stock,
                stock_quantity=self.stock_quantity,
                updated_at=now,
            )
        )

    def attach_image(self, image_url):
        self.image_url = image_url
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductImageUploaded(product_id=str(self.id), image_url=image_url))

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def has_stock_for(self, quantity) -> bool:
        return (self.stock_quantity or 0) >= quantity

    def decrement_stock(self, quantity, order_id=None):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.has_stock_for(quantity):
            raise ValidationError(
                {"stock_quantity": [f"Insufficient stock for {self.name}: {self.stock_quantity} available"]}
            )

        previous_stock = self.stock_quantity
        self.stock_quantity = previous_stock - quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockAdjusted(
                product_id=str(self.id),
                name=self.name,
                previous_stock=previous_stock,
                stock_quantity=self.stock_quantity,
                quantity_removed=quantity,
                order_id=str(order_id) if order_id else None,
                adjusted_at=now,
            )
        )


@store.repository(part_of=Product)
class ProductRepository:
    def catalogue(self, search=None, category=None):
        """Products matching ``search`` (name, case-insensitive) and ``category``, newest first."""
        query = self._dao.query
        if category:
            query = query.filter(category=category)
        if search:
            query = query.filter(name__icontains=search.strip())
        products = query.limit(None).all().items
        return sorted(products, key=lambda p: p.created_at or datetime.min.replace(tzinfo=UTC), reverse=True)

    def everything(self):
        return self._dao.query.limit(None).all().items
