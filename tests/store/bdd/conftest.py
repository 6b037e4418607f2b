"""Shared BDD fixtures and step definitions for the Store domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from store.cart.items import AddToCart
from store.product.management import AddProduct
from store.product.product import Product

SHOPPER_ID = "shopper-001"


@pytest.fixture()
def error():
    """Container for captured checkout errors."""
    return {"exc": None}


@pytest.fixture()
def catalogue():
    """Products created by the scenario, by name."""
    return {}


@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_catalogue(name, price, stock, catalogue):
    product_id = current_domain.process(
        AddProduct(name=name, price=price, stock_quantity=stock, category="groceries_staples", weight_kg=1.0),
        asynchronous=False,
    )
    catalogue[name] = product_id


@given(parsers.cfparse('the shopper has {quantity:d} "{name}" in the cart'))
def shopper_cart_line(quantity, name, catalogue):
    current_domain.process(
        AddToCart(customer_id=SHOPPER_ID, product_id=catalogue[name], quantity=quantity),
        asynchronous=False,
    )


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(name, stock, catalogue):
    assert current_domain.repository_for(Product).get(catalogue[name]).stock_quantity == stock
