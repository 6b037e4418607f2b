import pytest


@pytest.fixture(autouse=True)
def store_context():
    """Run every test inside the store domain context."""
    from store.domain import store

    ctx = store.domain_context()
    ctx.push()

    yield

    ctx.pop()


@pytest.fixture
def add_product():
    """Create a catalogue product through the AddProduct command; return the Product."""
    from protean import current_domain
    from store.product.management import AddProduct
    from store.product.product import Product

    def _add_product(name="Kenyan Tea", price=10.0, stock_quantity=20, category="beverages", weight_kg=0.5, **extra):
        product_id = current_domain.process(
            AddProduct(
                name=name,
                price=price,
                stock_quantity=stock_quantity,
                category=category,
                weight_kg=weight_kg,
                **extra,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Product).get(product_id)

    return _add_product


@pytest.fixture
def fill_cart():
    """Put ``(product, quantity)`` pairs into a customer's cart."""
    from protean import current_domain
    from store.cart.items import AddToCart

    def _fill_cart(customer_id, *lines):
        for product, quantity in lines:
            current_domain.process(
                AddToCart(customer_id=customer_id, product_id=str(product.id), quantity=quantity),
                asynchronous=False,
            )

    return _fill_cart


@pytest.fixture
def gateway():
    """Install a fresh FakeGateway for the test."""
    from store.gateway import set_gateway
    from store.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture
def delivery():
    return {
        "street_address": "12 Moi Avenue",
        "apartment_suite": "Apt 4B",
        "city": "Nairobi",
        "state": "Nairobi County",
        "zip_code": "00100",
        "delivery_notes": "Call on arrival",
    }
