"""Back-office product management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from store.domain import logger, store
from store.product.product import Product, ProductCategory


@store.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    weight_kg = Float(default=0.0, min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)
    category = String(choices=ProductCategory, required=True)
    image_url = String(max_length=1000)
    video_url = String(max_length=1000)


@store.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    price = Float(min_value=0.0)
    weight_kg = Float(min_value=0.0)
    stock_quantity = Integer(min_value=0)
    category = String(choices=ProductCategory)
    image_url = String(max_length=1000)
    video_url = String(max_length=1000)


@store.command(part_of="Product")
class RemoveProduct:
    product_id = Identifier(required=True)


@store.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            description=command.description,
            price=command.price,
            weight_kg=command.weight_kg,
            stock_quantity=command.stock_quantity,
            category=command.category,
            image_url=command.image_url,
            video_url=command.video_url,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            weight_kg=command.weight_kg,
            stock_quantity=command.stock_quantity,
            category=command.category,
            image_url=command.image_url,
            video_url=command.video_url,
        )
        repo.add(product)

    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("Product removed", product_id=str(command.product_id), name=product.name)
