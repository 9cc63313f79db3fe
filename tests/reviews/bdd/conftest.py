"""Shared BDD fixtures and step definitions for the Reviews context."""

from decimal import Decimal

import pytest
from pytest_bdd import given, parsers


@pytest.fixture()
def error():
    """Container for captured review errors."""
    return {"exc": None}


@given("a registered shopper", target_fixture="shopper")
def registered_shopper(make_user):
    return make_user()


@given(parsers.cfparse('a product "{name}"'), target_fixture="product")
def named_product(make_product, name):
    return make_product(name=name, price=Decimal("15.00"))
