"""Tests for product and category invariants."""

from decimal import Decimal
from uuid import uuid4

import pytest

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.exceptions import ValidationError


def _make_product(**overrides):
    fields = {"sku": "MUG-001", "name": "Coffee Mug", "price": Decimal("8.50"), "stock_quantity": 5}
    fields.update(overrides)
    return Product.create(**fields)


class TestProductInvariants:
    def test_price_is_rounded_to_cents(self):
        assert _make_product(price="8.499").price == Decimal("8.50")

    def test_negative_price(self):
        with pytest.raises(ValidationError, match="Price must not be negative"):
            _make_product(price=Decimal("-0.01"))

    def test_negative_price_fails_the_invariant(self):
        product = _make_product()
        with pytest.raises(ValidationError, match="Price must not be negative"):
            product.price = Decimal("-1.00")

    def test_negative_stock(self):
        with pytest.raises(ValidationError):
            _make_product(stock_quantity=-1)

    @pytest.mark.parametrize("field", ["sku", "name"])
    def test_required_text(self, field):
        with pytest.raises(ValidationError):
            _make_product(**{field: "   "})

    def test_sku_is_trimmed(self):
        assert _make_product(sku="  MUG-002 ").sku == "MUG-002"

    def test_new_products_are_active_with_no_images(self):
        product = _make_product()
        assert product.is_active is True
        assert product.images == []


class TestOrderability:
    def test_can_be_ordered(self):
        product = _make_product(stock_quantity=3)
        assert product.can_be_ordered(3)
        assert not product.can_be_ordered(4)
        assert not product.can_be_ordered(0)

    def test_inactive_cannot_be_ordered(self):
        assert not _make_product(is_active=False).can_be_ordered(1)

    def test_primary_image(self):
        assert _make_product().primary_image is None
        assert _make_product(images=["a.jpg", "b.jpg"]).primary_image == "a.jpg"

    def test_in_stock(self):
        assert _make_product(stock_quantity=1).in_stock
        assert not _make_product(stock_quantity=0).in_stock


class TestStockAdjustment:
    def test_adjust_up_and_down(self):
        product = _make_product(stock_quantity=5)
        product.adjust_stock(3)
        product.adjust_stock(-8)
        assert product.stock_quantity == 0

    def test_cannot_go_negative(self):
        product = _make_product(stock_quantity=2)
        with pytest.raises(ValidationError, match="Insufficient stock. Available: 2"):
            product.adjust_stock(-3)
        assert product.stock_quantity == 2


class TestUpdateDetails:
    def test_partial_update(self):
        product = _make_product()
        product.update_details(price=Decimal("9.99"), is_active=False)
        assert product.price == Decimal("9.99")
        assert product.is_active is False
        assert product.name == "Coffee Mug"


class TestCategory:
    def test_name_is_required(self):
        with pytest.raises(ValidationError, match="Category name is required"):
            Category.create(name="  ")

    def test_cannot_be_its_own_parent(self):
        category = Category.create(name="Kitchen")
        with pytest.raises(ValidationError):
            category.move_under(category.id)

    def test_move_under(self):
        category = Category.create(name="Mugs")
        parent_id = str(uuid4())
        category.move_under(parent_id)
        assert category.parent_id == parent_id
