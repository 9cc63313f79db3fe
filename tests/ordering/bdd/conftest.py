"""Shared BDD fixtures and step definitions for the Ordering context."""

from decimal import Decimal

import pytest
from protean import current_domain
from protean.exceptions import ProteanException
from pytest_bdd import given, parsers, then

from storefront.catalogue.product_management import get_product
from storefront.ordering.cart import queries as cart_queries
from storefront.ordering.cart.items import AddToCart


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the exception a step was expected to raise."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products created by the scenario, by name."""
    return {}



# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered shopper", target_fixture="shopper")
def registered_shopper(make_user):
    return make_user()


@given(parsers.cfparse('a product "{name}" priced "{price}" with {stock:d} in stock'))
def product_in_stock(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price=Decimal(price), stock_quantity=stock)


@given(parsers.cfparse('the shopper has {quantity:d} of "{name}" in the cart'))
def shopper_has_in_cart(shopper, products, quantity, name):
    current_domain.process(
        AddToCart(user_id=shopper.id, product_id=products[name].id, quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the request is rejected")
def request_rejected(error):
    assert isinstance(error["exc"], ProteanException)


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(products, name, stock):
    assert get_product(products[name].id).product.stock_quantity == stock
