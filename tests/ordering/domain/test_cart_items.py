"""Tests for cart item management and cart totals."""

from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest

from storefront.exceptions import ObjectNotFoundError, ValidationError
from storefront.ordering.cart.cart import CartItem, ShoppingCart, cart_totals


def _id() -> str:
    return str(uuid4())


def _make_cart():
    return ShoppingCart.create(user_id=_id())


class TestAddItem:
    def test_add_item(self):
        cart = _make_cart()
        cart.add_item(_id(), 2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_add_same_product_increases_quantity(self):
        cart = _make_cart()
        product_id = _id()
        first = cart.add_item(product_id, 1)
        second = cart.add_item(product_id, 2)
        assert len(cart.items) == 1
        assert first is second
        assert cart.items[0].quantity == 3

    def test_add_different_product_creates_new_item(self):
        cart = _make_cart()
        cart.add_item(_id(), 1)
        cart.add_item(_id(), 1)
        assert len(cart.items) == 2

    @pytest.mark.parametrize("quantity", [0, -1, None])
    def test_rejects_non_positive_quantity(self, quantity):
        cart = _make_cart()
        with pytest.raises(ValidationError) as exc:
            cart.add_item(_id(), quantity)
        assert exc.value.messages == {"quantity": ["Quantity must be at least 1"]}
        assert cart.is_empty


class TestUpdateQuantity:
    def test_update_quantity(self):
        cart = _make_cart()
        item = cart.add_item(_id(), 1)
        cart.update_item_quantity(item.id, 5)
        assert cart.items[0].quantity == 5

    def test_zero_quantity_leaves_item_unchanged(self):
        cart = _make_cart()
        item = cart.add_item(_id(), 3)
        with pytest.raises(ValidationError, match="Quantity must be at least 1"):
            cart.update_item_quantity(item.id, 0)
        assert cart.items[0].quantity == 3

    def test_unknown_item(self):
        cart = _make_cart()
        with pytest.raises(ObjectNotFoundError):
            cart.update_item_quantity(_id(), 2)


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _make_cart()
        keep = cart.add_item(_id(), 1)
        drop = cart.add_item(_id(), 1)
        cart.remove_item(drop.id)
        assert [item.id for item in cart.items] == [keep.id]

    def test_remove_unknown_item(self):
        cart = _make_cart()
        with pytest.raises(ObjectNotFoundError):
            cart.remove_item(_id())

    def test_clear(self):
        cart = _make_cart()
        cart.add_item(_id(), 1)
        cart.add_item(_id(), 4)
        cart.clear()
        assert cart.is_empty

    def test_mutations_touch_updated_at(self):
        cart = _make_cart()
        before = cart.updated_at
        cart.add_item(_id(), 1)
        assert cart.updated_at >= before
        assert cart.created_at <= cart.updated_at


class TestCartTotals:
    def test_sums_quantities_and_values(self):
        first, second = _id(), _id()
        items = [
            CartItem(product_id=first, quantity=2),
            CartItem(product_id=second, quantity=3),
        ]
        products = {
            first: SimpleNamespace(price=Decimal("10.00")),
            second: SimpleNamespace(price=Decimal("5.00")),
        }

        totals = cart_totals(items, products)

        assert totals.total_items == 5
        assert totals.total_value == Decimal("35.00")

    def test_missing_product_or_price_counts_as_zero(self):
        known, gone, unpriced = _id(), _id(), _id()
        items = [
            CartItem(product_id=known, quantity=1),
            CartItem(product_id=gone, quantity=2),
            CartItem(product_id=unpriced, quantity=4),
        ]
        products = {known: SimpleNamespace(price=Decimal("7.50")), unpriced: SimpleNamespace(price=None)}

        totals = cart_totals(items, products)

        assert totals.total_items == 7
        assert totals.total_value == Decimal("7.50")

    def test_empty_cart(self):
        totals = cart_totals([], {})
        assert totals.total_items == 0
        assert totals.total_value == Decimal("0.00")
