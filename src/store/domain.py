"""Store bounded context: catalogue, carts, checkout and orders."""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

# Composition root for products, carts and orders
store = Domain(name="store")
