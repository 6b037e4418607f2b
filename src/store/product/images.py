"""Product images — upload through file storage, then link to the product."""

from uuid import uuid4

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from store.domain import logger, store
from store.product.product import Product
from store.storage import get_storage

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


@store.command(part_of="Product")
class AttachProductImage:
    product_id = Identifier(required=True)
    image_url = String(required=True, max_length=1000)


@store.command_handler(part_of=Product)
class ProductImagesHandler:
    @handle(AttachProductImage)
    def attach_image(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.attach_image(command.image_url)
        repo.add(product)


def image_key(filename):
    """A collision-free storage key that keeps the uploaded file's extension."""
    extension = filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else "bin"
    return f"{uuid4().hex}.{extension}"


def upload_product_image(product_id, filename, content, content_type=None):
    """Store an uploaded image and point the product at it. Returns the public URL."""
    if content_type and content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError({"file": [f"Unsupported image type {content_type}"]})
    if not content:
        raise ValidationError({"file": ["Uploaded file is empty"]})

    # Fail before uploading if the product is gone
    current_domain.repository_for(Product).get(product_id)

    stored = get_storage().upload(image_key(filename), content, content_type)
    logger.info("Product image stored", product_id=str(product_id), key=stored.key, size=stored.size)

    current_domain.process(AttachProductImage(product_id=product_id, image_url=stored.public_url), asynchronous=False)
    return stored.public_url
